# src/recowidget/clients.py
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Union

from .artifacts import load_catalog
from .dispatcher import FetchKind, FetchTarget
from .schemas import (
    ClickEvent,
    Correlation,
    ImpressionEvent,
    ItemRef,
    RecommendationItem,
    RecommendationResult,
)
from .state import RecommendationState

logger = logging.getLogger(__name__)


class RecommendationClient(Protocol):
    state: RecommendationState

    def fetch_by_zone(self, zone: str, products: Sequence[Any]) -> None: ...

    def fetch_by_recommender(self, recommender: str, products: Sequence[Any]) -> None: ...

    def emit_impression(self, correlation: Correlation, items: List[ItemRef]) -> None: ...

    def emit_click(self, correlation: Correlation, item: RecommendationItem) -> None: ...


class VisibilityObserver(Protocol):
    def observe(self, element: Any, *, once: bool = True) -> bool: ...

    def subscribe(self, element: Any, listener: Callable[[bool], None]) -> Callable[[], None]: ...


@dataclass
class FetchRequest:
    request_id: int
    target: FetchTarget
    products: List[Any] = field(default_factory=list)


class InMemoryRecommendationClient:
    """
    Recommendation client that keeps requests and events in memory.

    Fetches only flip the state to loading; the caller completes them with
    resolve() or fail(). Only the latest request may land, older ones are
    dropped (latest result wins).
    """

    def __init__(self):
        self.state = RecommendationState()
        self.requests: List[FetchRequest] = []
        self.impressions: List[ImpressionEvent] = []
        self.clicks: List[ClickEvent] = []
        self._settled: set = set()

    @property
    def latest(self) -> Optional[FetchRequest]:
        return self.requests[-1] if self.requests else None

    def fetch_by_zone(self, zone: str, products: Sequence[Any]) -> None:
        self._start(FetchTarget(FetchKind.ZONE, zone), products)

    def fetch_by_recommender(self, recommender: str, products: Sequence[Any]) -> None:
        self._start(FetchTarget(FetchKind.RECOMMENDER, recommender), products)

    def _start(self, target: FetchTarget, products: Sequence[Any]) -> FetchRequest:
        request = FetchRequest(len(self.requests) + 1, target, list(products))
        self.requests.append(request)
        logger.debug("request %d: %s %s", request.request_id, target.kind.value, target.name)
        self.state.set_loading()
        return request

    def resolve(
        self,
        result: Union[RecommendationResult, Dict[str, Any], None],
        request_id: Optional[int] = None,
    ) -> bool:
        """Complete a request; returns False if it was stale or already settled."""
        latest = self.latest
        if latest is None:
            raise LookupError("no request to resolve")
        if request_id is None:
            request_id = latest.request_id
        if request_id != latest.request_id or request_id in self._settled:
            logger.debug("dropping stale result for request %d", request_id)
            self._settled.add(request_id)
            return False

        if isinstance(result, dict):
            result = RecommendationResult.model_validate(result)
        self._settled.add(request_id)
        self.state.set_result(result)
        return True

    def fail(self, request_id: Optional[int] = None) -> bool:
        return self.resolve(RecommendationResult(), request_id)

    def emit_impression(self, correlation: Correlation, items: List[ItemRef]) -> None:
        self.impressions.append(ImpressionEvent(correlation=correlation, items=list(items)))

    def emit_click(self, correlation: Correlation, item: RecommendationItem) -> None:
        self.clicks.append(ClickEvent(correlation=correlation, item=item))


class StaticRecommendationClient(InMemoryRecommendationClient):
    """Answers every fetch synchronously from a fixture catalog."""

    def __init__(self, catalog: Optional[Dict[str, Dict[str, RecommendationResult]]] = None,
                 catalog_path: Optional[Path] = None):
        super().__init__()
        self.catalog = catalog if catalog is not None else load_catalog(catalog_path)

    def _start(self, target: FetchTarget, products: Sequence[Any]) -> FetchRequest:
        request = super()._start(target, products)
        section = "zones" if target.kind is FetchKind.ZONE else "recommenders"
        result = self.catalog.get(section, {}).get(target.name)
        if result is None:
            logger.debug("no canned result for %s %s", target.kind.value, target.name)
            result = RecommendationResult()
        self.resolve(result, request.request_id)
        return request


class ManualVisibilityObserver:
    """
    Visibility observer driven by hand.

    With honour_once=True (the default) an element observed with once=True
    stays visible after its first True reading; with honour_once=False every
    transition is reported, as a naive intersection observer would.
    """

    def __init__(self, honour_once: bool = True):
        self.honour_once = honour_once
        self._visible: Dict[int, bool] = {}
        self._once: Dict[int, bool] = {}
        self._listeners: Dict[int, List[Callable[[bool], None]]] = {}

    def observe(self, element: Any, *, once: bool = True) -> bool:
        self._once[id(element)] = once
        return self._visible.get(id(element), False)

    def subscribe(self, element: Any, listener: Callable[[bool], None]) -> Callable[[], None]:
        listeners = self._listeners.setdefault(id(element), [])
        listeners.append(listener)

        def unsubscribe() -> None:
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def set_visible(self, element: Any, visible: bool = True) -> None:
        key = id(element)
        current = self._visible.get(key, False)
        if self.honour_once and self._once.get(key) and current:
            return
        if visible == current and self.honour_once:
            return
        self._visible[key] = visible
        for listener in list(self._listeners.get(key, [])):
            listener(visible)
