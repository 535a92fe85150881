# src/recowidget/visibility.py
import logging
from enum import Enum
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class ImpressionPhase(str, Enum):
    NOT_YET_VISIBLE = "not_yet_visible"
    VISIBLE_EMITTED = "visible_emitted"


class ImpressionLatch:
    """One-shot latch: once fired it never resets for the controller's lifetime."""

    def __init__(self):
        self.phase = ImpressionPhase.NOT_YET_VISIBLE

    @property
    def fired(self) -> bool:
        return self.phase is ImpressionPhase.VISIBLE_EMITTED

    def fire(self) -> bool:
        if self.fired:
            return False
        self.phase = ImpressionPhase.VISIBLE_EMITTED
        return True


class VisibilityMonitor:
    """
    Adapts a VisibilityObserver into a sticky "has been visible" flag.

    The observer is asked for once-semantics, but a True reading is kept here
    even if the observer later reports the element as hidden again.
    """

    def __init__(self, observer, element: Any, on_change: Optional[Callable[[bool], None]] = None):
        self.observer = observer
        self.element = element
        self._on_change = on_change
        self._visible = False
        self._unsubscribe = None

    @property
    def visible(self) -> bool:
        return self._visible

    def attach(self) -> bool:
        self._unsubscribe = self.observer.subscribe(self.element, self._handle)
        if self.observer.observe(self.element, once=True):
            self._handle(True)
        return self._visible

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _handle(self, visible: bool) -> None:
        if not visible or self._visible:
            return
        self._visible = True
        logger.debug("element %r became visible", self.element)
        if self._on_change is not None:
            self._on_change(True)
