"""Entry-time checks.

Ordering, token resolution and migration never reject data; this module
reports what they silently absorbed so an operator can fix it.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, List, Literal, Optional

from pydantic import BaseModel

from .migrate import build_document
from .normalise import ensure_fan_zone_schedule
from .present import TEXT_FIELDS, build_token_context
from .timecode import is_fan_zone_time, is_running_order_time
from .tokens import unresolved_tokens

Level = Literal["error", "warning"]


class Issue(BaseModel):
    level: Level
    code: str
    message: str
    ref: Optional[str] = None  # item or category id


def _duplicates(ids: List[str], kind: str) -> List[Issue]:
    return [
        Issue(level="error", code=f"duplicate-{kind}-id", message=f"{kind} id {i!r} used {n} times", ref=i)
        for i, n in Counter(ids).items()
        if n > 1
    ]


def validate_document(raw: Any, cfg: Optional[dict] = None) -> List[Issue]:
    doc = build_document(raw)
    issues: List[Issue] = []
    category_ids = {c.id for c in doc.categories}
    context = build_token_context(doc, cfg)

    issues += _duplicates([c.id for c in doc.categories], "category")
    issues += _duplicates([it.id for it in doc.running_order], "item")

    for it in doc.running_order:
        if not it.time:
            issues.append(Issue(level="error", code="missing-time", message=f"item {it.title or it.id!r} has no time", ref=it.id))
        elif not is_running_order_time(it.time):
            issues.append(
                Issue(level="error", code="bad-time", message=f"unrecognised time {it.time!r}; it will sort last", ref=it.id)
            )
        if not it.category:
            issues.append(Issue(level="warning", code="no-category", message=f"item {it.title or it.id!r} has no category and is not displayed", ref=it.id))
        elif it.category not in category_ids:
            issues.append(
                Issue(level="warning", code="dangling-category", message=f"category {it.category!r} does not exist; item is not displayed", ref=it.id)
            )
        data = it.dump()
        for field in TEXT_FIELDS:
            for tok in unresolved_tokens(data.get(field, ""), context):
                issues.append(Issue(level="warning", code="unresolved-token", message=f"[{tok}] in {field} has no value", ref=it.id))
    return issues


def validate_fan_zone(raw: Any) -> List[Issue]:
    schedule = ensure_fan_zone_schedule(raw)
    issues = _duplicates([it.id for it in schedule.items], "item")
    for it in schedule.items:
        if not is_fan_zone_time(it.time):
            issues.append(
                Issue(level="error", code="bad-time", message=f"unrecognised time {it.time!r}; it will sort last", ref=it.id)
            )
    return issues


def has_errors(issues: List[Issue]) -> bool:
    return any(i.level == "error" for i in issues)
