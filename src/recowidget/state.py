# src/recowidget/state.py
import logging
from typing import Callable, List, Optional

from .config import MIN_ITEMS_TO_SHOW
from .schemas import RecommendationResult

logger = logging.getLogger(__name__)

Listener = Callable[["RecommendationState"], None]


class RecommendationState:
    """
    Latest value published by a recommendation client.

    Single writer (the client), any number of readers. Every change is a
    wholesale replacement and notifies subscribers synchronously.
    """

    def __init__(self):
        self._is_loading = False
        self._recommendations: Optional[RecommendationResult] = None
        self._listeners: List[Listener] = []

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def recommendations(self) -> Optional[RecommendationResult]:
        return self._recommendations

    @property
    def items(self):
        if self._recommendations is None:
            return []
        return self._recommendations.items

    def has_items(self) -> bool:
        return len(self.items) >= MIN_ITEMS_TO_SHOW

    def set_loading(self) -> None:
        # previous recommendations stay readable until the new result lands
        self._is_loading = True
        self._notify()

    def set_result(self, result: Optional[RecommendationResult]) -> None:
        self._is_loading = False
        self._recommendations = result
        self._notify()

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        logger.debug(
            "recommendation state: loading=%s items=%d",
            self._is_loading,
            len(self.items),
        )
        # copy: listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            listener(self)
