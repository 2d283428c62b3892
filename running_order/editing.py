"""Authoring operations on canonical documents.

Every function takes a document and returns a new canonical document; the
input is left untouched. Audio fields are re-derived on every write so
``audioSources``, ``audio`` and ``audioOption`` never drift apart.
"""

from __future__ import annotations

import logging
import uuid
from collections import Counter
from typing import Any, Iterable, Mapping, Optional

from .migrate import build_document
from .models import AppData, RunningOrderCategory, RunningOrderItem
from .normalise import ensure_item
from .utils import slugify

logger = logging.getLogger(__name__)


def new_item_id() -> str:
    return uuid.uuid4().hex


def _merge(item: Mapping[str, Any], updates: Mapping[str, Any]) -> dict:
    merged = {**item, **updates}
    if "audioSources" in updates:
        merged.pop("audioOption", None)
        merged.pop("audio", None)
    elif "audioOption" in updates:
        merged.pop("audioSources", None)
        merged.pop("audio", None)
    elif "audio" in updates:
        if updates["audio"] is False:
            merged["audioSources"] = []
            merged.pop("audioOption", None)
    if "ledRing" in updates and "ringLed" not in updates:
        merged["ringLed"] = updates["ledRing"]
    elif "ringLed" in updates and "ledRing" not in updates:
        merged["ledRing"] = updates["ringLed"]
    return merged


def new_item(fields: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> dict:
    """A canonical item with a freshly generated id."""
    data = {**(fields or {}), **kwargs}
    if not data.get("id"):
        data["id"] = new_item_id()
    return ensure_item(_merge({}, data), 0).dump()


def with_audio_sources(item: Mapping[str, Any], sources: Iterable[str]) -> dict:
    return ensure_item(_merge(item, {"audioSources": list(sources)}), 0).dump()


def _replace_items(doc: AppData, items: list[RunningOrderItem]) -> dict:
    return doc.model_copy(update={"running_order": items}).dump()


def add_item(document: Any, fields: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> dict:
    doc = build_document(document)
    item = RunningOrderItem.model_validate(new_item(fields, **kwargs))
    return _replace_items(doc, [*doc.running_order, item])


def update_item(document: Any, item_id: str, updates: Mapping[str, Any]) -> dict:
    """Apply field updates to one item; unknown ids leave the document unchanged."""
    doc = build_document(document)
    items = []
    found = False
    for i, it in enumerate(doc.running_order):
        if it.id == item_id:
            found = True
            merged = _merge(it.dump(), {k: v for k, v in updates.items() if k != "id"})
            it = ensure_item(merged, i)
        items.append(it)
    if not found:
        logger.debug("update_item: no item %r", item_id)
    return _replace_items(doc, items)


def set_item_active(document: Any, item_id: str, active: bool) -> dict:
    return update_item(document, item_id, {"active": bool(active)})


def set_audio_sources(document: Any, item_id: str, sources: Iterable[str]) -> dict:
    return update_item(document, item_id, {"audioSources": list(sources)})


def delete_item(document: Any, item_id: str) -> dict:
    doc = build_document(document)
    return _replace_items(doc, [it for it in doc.running_order if it.id != item_id])


def _unique_category_id(name: str, existing: set[str]) -> str:
    base = slugify(name) or f"category-{len(existing) + 1}"
    candidate = base
    n = 2
    while candidate in existing:
        candidate = f"{base}-{n}"
        n += 1
    return candidate


def add_category(document: Any, name: str, category_id: Optional[str] = None) -> dict:
    doc = build_document(document)
    name = (name or "").strip()
    if not name:
        return doc.dump()
    existing = {c.id for c in doc.categories}
    cid = category_id or _unique_category_id(name, existing)
    category = RunningOrderCategory(id=cid, name=name)
    return doc.model_copy(update={"categories": [*doc.categories, category]}).dump()


def rename_category(document: Any, category_id: str, name: str) -> dict:
    doc = build_document(document)
    name = (name or "").strip()
    if not name:
        return doc.dump()
    categories = [
        c.model_copy(update={"name": name}) if c.id == category_id else c for c in doc.categories
    ]
    return doc.model_copy(update={"categories": categories}).dump()


def delete_category(document: Any, category_id: str, delete_items: bool = False) -> dict:
    """Remove a category.

    Its items are kept (and no longer displayed) unless ``delete_items`` is set.
    """
    doc = build_document(document)
    categories = [c for c in doc.categories if c.id != category_id]
    items = doc.running_order
    if delete_items:
        items = [it for it in items if it.category != category_id]
    return doc.model_copy(update={"categories": categories, "running_order": items}).dump()


def category_item_counts(document: Any) -> list[tuple[dict, int]]:
    """Every category with its item count, inactive items included."""
    doc = build_document(document)
    counts = Counter(it.category for it in doc.running_order)
    return [(c.dump(), counts.get(c.id, 0)) for c in doc.categories]

