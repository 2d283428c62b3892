"""Canonical document shape and one-time versioned upgrades.

``ensure_document_shape`` accepts any JSON-like value (saved documents of
any age, templates, partial objects) and returns a fully populated
canonical document as a plain dict. It is idempotent: feeding its output
back in returns an equal value.

``dataVersion`` records which upgrades have already run. Each entry of
``MIGRATIONS`` is applied once, while the stamped version is below its
threshold, and never again afterwards, even when the document still looks
like legacy data.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, List, Mapping, Tuple

from pydantic import BaseModel

from . import config
from .models import AppData, Stadium, Team
from .normalise import (
    ensure_category,
    ensure_competition,
    ensure_item,
    ensure_match_config,
    listing,
    mapping,
    text,
)

logger = logging.getLogger(__name__)

BASE_DATA_VERSION = 1
CATEGORY_ITEM_OFFSET = 1000


def snap_reference_data(doc: AppData) -> AppData:
    """v1 -> v2: replace stadiums and teams with the canonical bilingual set."""
    competition = doc.competition.model_copy(
        update={
            "stadiums": [Stadium(**s) for s in config.default_stadiums()],
            "teams": [Team(**t) for t in config.default_teams()],
        }
    )
    return doc.model_copy(update={"competition": competition})


# (threshold version, transform) in ascending order
MIGRATIONS: List[Tuple[int, Callable[[AppData], AppData]]] = [
    (2, snap_reference_data),
]

CURRENT_DATA_VERSION = MIGRATIONS[-1][0]


def data_version(value: Mapping[str, Any]) -> int:
    raw = value.get("dataVersion")
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return BASE_DATA_VERSION
    if not math.isfinite(raw):
        return BASE_DATA_VERSION
    return int(raw)


def apply_migrations(doc: AppData, version: int) -> AppData:
    for threshold, transform in MIGRATIONS:
        if version < threshold:
            logger.debug("upgrading document v%d -> v%d (%s)", version, threshold, transform.__name__)
            doc = transform(doc)
            version = threshold
    return doc.model_copy(update={"data_version": max(version, CURRENT_DATA_VERSION)})


def _as_mapping(raw: Any) -> Mapping[str, Any]:
    if isinstance(raw, BaseModel):
        return raw.model_dump(by_alias=True)
    return mapping(raw)


def build_document(raw: Any) -> AppData:
    """Canonical AppData model for any input."""
    value = _as_mapping(raw)
    version = data_version(value)

    running_order = [ensure_item(it, i) for i, it in enumerate(listing(value.get("runningOrder")))]

    if isinstance(value.get("categories"), (list, tuple)):
        categories = [
            ensure_category(c, i, i * CATEGORY_ITEM_OFFSET)
            for i, c in enumerate(value["categories"])
        ]
    else:
        categories = [
            ensure_category(c, i, i * CATEGORY_ITEM_OFFSET)
            for i, c in enumerate(config.default_categories())
        ]

    doc = AppData(
        competition=ensure_competition(value.get("competition")),
        running_order=running_order,
        categories=categories,
        selected_venue=text(value.get("selectedVenue")),
        match_config=ensure_match_config(value.get("matchConfig")),
        data_version=version,
    )
    return apply_migrations(doc, version)


def ensure_document_shape(raw: Any) -> dict:
    return build_document(raw).dump()


migrate = ensure_document_shape
