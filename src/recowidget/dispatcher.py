# src/recowidget/dispatcher.py
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Sequence

logger = logging.getLogger(__name__)


class FetchKind(str, Enum):
    ZONE = "zone"
    RECOMMENDER = "recommender"
    NONE = "none"


@dataclass(frozen=True)
class FetchTarget:
    kind: FetchKind
    name: Optional[str] = None

    @classmethod
    def resolve(cls, zone: Optional[str], recommender: Optional[str]) -> "FetchTarget":
        """Zone wins over recommender when both are given."""
        if zone:
            return cls(FetchKind.ZONE, zone)
        if recommender:
            return cls(FetchKind.RECOMMENDER, recommender)
        return NO_TARGET


NO_TARGET = FetchTarget(FetchKind.NONE)


class FetchDispatcher:
    def __init__(self, client):
        self.client = client

    def dispatch(
        self,
        zone: Optional[str],
        recommender: Optional[str],
        products: Optional[Sequence[Any]],
        should_fetch: Optional[Callable[[], bool]] = None,
    ) -> FetchTarget:
        """
        Issue at most one fetch for the given inputs and return what was fetched.

        Errors raised by `should_fetch` or by the client are not caught.
        """
        if callable(should_fetch) and not should_fetch():
            logger.debug("fetch suppressed by should_fetch (zone=%s, recommender=%s)", zone, recommender)
            return NO_TARGET

        target = FetchTarget.resolve(zone, recommender)
        context = list(products) if products is not None else []

        if target.kind is FetchKind.ZONE:
            logger.debug("fetching zone %s with %d context products", target.name, len(context))
            self.client.fetch_by_zone(target.name, context)
        elif target.kind is FetchKind.RECOMMENDER:
            logger.debug("fetching recommender %s with %d context products", target.name, len(context))
            self.client.fetch_by_recommender(target.name, context)
        else:
            logger.debug("no zone or recommender, nothing to fetch")
        return target
