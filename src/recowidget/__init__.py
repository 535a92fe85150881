# src/recowidget/__init__.py
from .clients import (
    InMemoryRecommendationClient,
    ManualVisibilityObserver,
    RecommendationClient,
    StaticRecommendationClient,
    VisibilityObserver,
)
from .controller import RecommendedProducts, RenderSurface
from .dispatcher import FetchDispatcher, FetchKind, FetchTarget
from .equality import ContextSnapshot, should_update
from .errors import CatalogError, ControllerClosedError, RecoWidgetError
from .schemas import (
    ClickEvent,
    Correlation,
    ImpressionEvent,
    ItemRef,
    RecommendationItem,
    RecommendationResult,
)
from .state import RecommendationState
from .telemetry import JsonLineFormatter, setup_logging

__all__ = [
    "CatalogError",
    "ClickEvent",
    "ContextSnapshot",
    "ControllerClosedError",
    "Correlation",
    "FetchDispatcher",
    "FetchKind",
    "FetchTarget",
    "ImpressionEvent",
    "InMemoryRecommendationClient",
    "ItemRef",
    "JsonLineFormatter",
    "ManualVisibilityObserver",
    "RecoWidgetError",
    "RecommendationClient",
    "RecommendationItem",
    "RecommendationResult",
    "RecommendationState",
    "RecommendedProducts",
    "RenderSurface",
    "StaticRecommendationClient",
    "VisibilityObserver",
    "setup_logging",
    "should_update",
]
