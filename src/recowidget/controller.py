# src/recowidget/controller.py
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

from .dispatcher import NO_TARGET, FetchDispatcher, FetchTarget
from .equality import ContextSnapshot
from .errors import ControllerClosedError
from .events import EventEmitter
from .schemas import RecommendationItem
from .state import RecommendationState
from .visibility import VisibilityMonitor

logger = logging.getLogger(__name__)

_UNSET: Any = object()


@dataclass
class RenderSurface:
    """What the rendering collaborator needs to draw the product scroller."""

    title: Optional[str]
    items: List[RecommendationItem]
    is_loading: bool
    on_item_click: Callable[[RecommendationItem], None]
    options: Dict[str, Any] = field(default_factory=dict)

    def tile_props(self, item: RecommendationItem) -> Dict[str, Callable[[], None]]:
        return {"on_click": lambda: self.on_item_click(item)}


class RecommendedProducts:
    """
    Fetches recommendations for a zone or a recommender and reports what the
    user saw and clicked.

    Construction counts as mounting: the initial inputs are dispatched right
    away and the element starts being watched. Later input changes go through
    update(); a fetch is only considered when zone, recommender or the context
    products actually change.
    """

    def __init__(
        self,
        client,
        observer,
        *,
        zone: Optional[str] = None,
        recommender: Optional[str] = None,
        products: Any = None,
        title: Optional[str] = None,
        should_fetch: Optional[Callable[[], bool]] = None,
        element: Any = None,
        **options: Any,
    ):
        self.client = client
        self.zone = zone
        self.recommender = recommender
        self.title = title
        self.should_fetch = should_fetch
        self.options: Dict[str, Any] = dict(options)
        self.element = element if element is not None else object()

        self.snapshot = ContextSnapshot(products)
        self.dispatcher = FetchDispatcher(client)
        self.emitter = EventEmitter(client)
        self.monitor = VisibilityMonitor(observer, self.element, self._on_visible)
        self.last_target: FetchTarget = NO_TARGET
        self._closed = False

        # a raising should_fetch must not leave a listener behind on the client
        self._fetch()
        self._unsubscribe = client.state.subscribe(self._on_state)
        self.monitor.attach()

    @property
    def state(self) -> RecommendationState:
        return self.client.state

    @property
    def is_visible(self) -> bool:
        return self.monitor.visible

    @property
    def impression_sent(self) -> bool:
        return self.emitter.latch.fired

    @property
    def has_content(self) -> bool:
        # while loading there is always something (a placeholder) to show
        return self.state.is_loading or self.state.has_items()

    def update(
        self,
        *,
        zone: Optional[str] = _UNSET,
        recommender: Optional[str] = _UNSET,
        products: Any = _UNSET,
        title: Optional[str] = _UNSET,
        should_fetch: Optional[Callable[[], bool]] = _UNSET,
        **options: Any,
    ) -> bool:
        """
        Apply new inputs. Returns True when zone, recommender or the context
        products changed and the fetch decision was re-run.

        Inputs are only committed once the fetch decision has gone through, so
        an error from `should_fetch` leaves the controller as it was.
        """
        self._check_open()

        new_zone = self.zone if zone is _UNSET else zone
        new_recommender = self.recommender if recommender is _UNSET else recommender
        new_should_fetch = self.should_fetch if should_fetch is _UNSET else should_fetch
        new_products = None if products is _UNSET else self.snapshot.candidate(products)

        changed = (
            new_zone != self.zone
            or new_recommender != self.recommender
            or new_products is not None
        )
        if changed:
            self.last_target = self.dispatcher.dispatch(
                new_zone,
                new_recommender,
                new_products if new_products is not None else self.snapshot.products,
                new_should_fetch,
            )

        self.zone = new_zone
        self.recommender = new_recommender
        self.should_fetch = new_should_fetch
        if new_products is not None:
            self.snapshot.replace(new_products)
        if title is not _UNSET:
            self.title = title
        self.options.update(options)
        return changed

    def render(self) -> Optional[RenderSurface]:
        """Return the render surface, or None when the widget should not appear."""
        self._check_open()
        if not self.has_content:
            return None
        result = self.state.recommendations
        return RenderSurface(
            title=self.title or (result.display_message if result is not None else None),
            items=list(self.state.items),
            is_loading=self.state.is_loading,
            on_item_click=self.handle_item_click,
            options=dict(self.options),
        )

    def handle_item_click(self, item: Union[RecommendationItem, Dict[str, Any]]) -> None:
        self._check_open()
        if isinstance(item, dict):
            item = RecommendationItem.model_validate(item)
        self.emitter.click(self.state.recommendations, item)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._unsubscribe()
        self.monitor.detach()
        logger.debug("controller for %s closed", self.zone or self.recommender)

    def _check_open(self) -> None:
        if self._closed:
            raise ControllerClosedError("controller has been closed")

    def _fetch(self) -> None:
        self.last_target = self.dispatcher.dispatch(
            self.zone,
            self.recommender,
            self.snapshot.products,
            self.should_fetch,
        )

    def _on_state(self, state: RecommendationState) -> None:
        self.emitter.maybe_impression(self.monitor.visible, state.recommendations)

    def _on_visible(self, visible: bool) -> None:
        self.emitter.maybe_impression(visible, self.state.recommendations)
