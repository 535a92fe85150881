# src/recowidget/errors.py


class RecoWidgetError(Exception):
    """Base class for errors raised by recowidget."""


class ControllerClosedError(RecoWidgetError):
    """The controller was used after close()."""


class CatalogError(RecoWidgetError):
    """A recommendation fixture catalog could not be loaded."""
