# src/recowidget/artifacts.py
from pathlib import Path
from typing import Dict, Optional
import json
import logging

from pydantic import ValidationError

from .config import CATALOG_PATH
from .errors import CatalogError
from .schemas import RecommendationResult

logger = logging.getLogger(__name__)

SECTIONS = ("zones", "recommenders")


def load_manifest(path: Path) -> dict:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise CatalogError(f"cannot read catalog {path}: {exc}") from exc


def load_catalog(path: Optional[Path] = None) -> Dict[str, Dict[str, RecommendationResult]]:
    """
    Load canned recommendation results keyed by zone and recommender name.

    File layout:
      {
        "zones": {"<zone>": {"recommenderName": ..., "recoUUID": ..., "recs": [{"id": ...}]}},
        "recommenders": {"<recommender>": {...}}
      }
    """
    path = Path(path) if path is not None else CATALOG_PATH
    manifest = load_manifest(path)
    if not isinstance(manifest, dict):
        raise CatalogError(f"catalog {path} must be a JSON object")

    catalog: Dict[str, Dict[str, RecommendationResult]] = {}
    for section in SECTIONS:
        entries = manifest.get(section) or {}
        try:
            catalog[section] = {
                name: RecommendationResult.model_validate(payload)
                for name, payload in entries.items()
            }
        except (AttributeError, ValidationError) as exc:
            raise CatalogError(f"invalid {section} in catalog {path}: {exc}") from exc

    logger.debug(
        "loaded catalog %s: %d zones, %d recommenders",
        path,
        len(catalog["zones"]),
        len(catalog["recommenders"]),
    )
    return catalog
