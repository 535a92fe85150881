# src/recowidget/config.py
from pathlib import Path
import os

# Root of the project (relative to this file)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Static recommendation fixtures used by the StaticRecommendationClient
FIXTURE_DIR = PROJECT_ROOT / "fixtures"
CATALOG_PATH = Path(os.getenv("RECOWIDGET_CATALOG", str(FIXTURE_DIR / "catalog.json")))

# Logging
LOG_LEVEL = os.getenv("RECOWIDGET_LOG_LEVEL", "INFO").upper()
TELEMETRY_LOGGER = "recowidget.telemetry"
TELEMETRY_LOG_PATH = os.getenv("RECOWIDGET_TELEMETRY_LOG") or None

# A result with fewer items than this is not worth showing
MIN_ITEMS_TO_SHOW = 1
