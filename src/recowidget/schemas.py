# src/recowidget/schemas.py
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecommendationItem(BaseModel):
    """A single recommended product; the service may attach any extra fields."""

    model_config = ConfigDict(extra="allow")

    id: str


class RecommendationResult(BaseModel):
    """One response from the recommendation service."""

    model_config = ConfigDict(populate_by_name=True)

    recommender_name: Optional[str] = Field(None, alias="recommenderName")
    reco_uuid: Optional[str] = Field(None, alias="recoUUID")
    display_message: Optional[str] = Field(None, alias="displayMessage")
    items: List[RecommendationItem] = Field(default_factory=list, alias="recs")


class Correlation(BaseModel):
    model_config = ConfigDict(frozen=True)

    recommender_name: Optional[str] = None
    reco_uuid: Optional[str] = None

    @classmethod
    def of(cls, result: RecommendationResult) -> "Correlation":
        return cls(recommender_name=result.recommender_name, reco_uuid=result.reco_uuid)


class ItemRef(BaseModel):
    id: str


class ImpressionEvent(BaseModel):
    correlation: Correlation
    items: List[ItemRef]
    emitted_at: datetime = Field(default_factory=_utcnow)


class ClickEvent(BaseModel):
    correlation: Correlation
    item: RecommendationItem
    emitted_at: datetime = Field(default_factory=_utcnow)
