# src/recowidget/events.py
import logging
from typing import Optional

from .config import TELEMETRY_LOGGER
from .schemas import Correlation, ItemRef, RecommendationItem, RecommendationResult
from .visibility import ImpressionLatch

logger = logging.getLogger(__name__)
telemetry = logging.getLogger(TELEMETRY_LOGGER)


class EventEmitter:
    """Sends impression and click events for a controller through its client."""

    def __init__(self, client):
        self.client = client
        self.latch = ImpressionLatch()

    def maybe_impression(self, visible: bool, result: Optional[RecommendationResult]) -> bool:
        """
        Emit the impression event if the element has been seen and there is
        something to report. Fires at most once per emitter.
        """
        if self.latch.fired:
            return False
        if not visible or result is None or not result.items:
            logger.debug("impression deferred (visible=%s, has_result=%s)", visible, result is not None)
            return False

        self.latch.fire()
        correlation = Correlation.of(result)
        items = [ItemRef(id=item.id) for item in result.items]
        self.client.emit_impression(correlation, items)
        telemetry.info(
            {
                "kind": "reco_impression",
                "recommender_name": correlation.recommender_name,
                "reco_uuid": correlation.reco_uuid,
                "items": [ref.id for ref in items],
            }
        )
        return True

    def click(self, result: Optional[RecommendationResult], item: RecommendationItem) -> None:
        correlation = Correlation.of(result) if result is not None else Correlation()
        self.client.emit_click(correlation, item)
        telemetry.info(
            {
                "kind": "reco_click",
                "recommender_name": correlation.recommender_name,
                "reco_uuid": correlation.reco_uuid,
                "item": item.id,
            }
        )
