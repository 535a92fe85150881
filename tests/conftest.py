"""Shared fixtures for the recowidget tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from recowidget import InMemoryRecommendationClient, ManualVisibilityObserver  # noqa: E402


class Product:
    """Opaque product reference; equal by sku but compared by identity."""

    def __init__(self, sku: str) -> None:
        self.sku = sku

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Product) and other.sku == self.sku

    def __hash__(self) -> int:
        return hash(self.sku)

    def __repr__(self) -> str:
        return f"Product({self.sku!r})"


@pytest.fixture
def client() -> InMemoryRecommendationClient:
    return InMemoryRecommendationClient()


@pytest.fixture
def observer() -> ManualVisibilityObserver:
    return ManualVisibilityObserver()


@pytest.fixture
def p1() -> Product:
    return Product("p1")


@pytest.fixture
def p2() -> Product:
    return Product("p2")


@pytest.fixture
def reco_payload() -> dict:
    return {
        "recoUUID": "r1",
        "recommenderName": "reco-1",
        "recs": [{"id": "x"}, {"id": "y"}],
    }
