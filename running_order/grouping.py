from __future__ import annotations

import math
from collections import defaultdict
from typing import Any, Iterable, List, Mapping, NamedTuple, Union

from .models import FanZoneSchedule
from .timecode import fan_zone_key, running_order_key, sort_by_time


class CategoryGroup(NamedTuple):
    category: Any
    items: List[Any]

    @property
    def earliest(self) -> float:
        """Sort key of the first item; infinity for an empty group."""
        if not self.items:
            return math.inf
        return running_order_key(_get(self.items[0], "time", ""))


def _get(obj: Any, name: str, default: Any = None) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def is_active(item: Any) -> bool:
    # only an explicit False hides an item
    return _get(item, "active", True) is not False


def sort_running_order(items: Iterable[Any]) -> List[Any]:
    """Flat timeline of active items, ordered by time."""
    return sort_by_time((it for it in items if is_active(it)), key=running_order_key)


def group_running_order(items: Iterable[Any], categories: Iterable[Any]) -> List[CategoryGroup]:
    """Group active items by category and order the groups by their earliest item.

    Items pointing at a category that does not exist are left out, as are
    categories without active items. When two categories share an id only
    the first one gets the items. Neither input is modified.
    """
    by_category: dict[str, List[Any]] = defaultdict(list)
    for it in items:
        if is_active(it):
            by_category[_get(it, "category", "")].append(it)

    groups: List[CategoryGroup] = []
    seen: set = set()
    for category in categories:
        category_id = _get(category, "id", "")
        if category_id in seen:
            continue
        seen.add(category_id)
        members = sort_by_time(by_category.get(category_id, []), key=running_order_key)
        groups.append(CategoryGroup(category=category, items=members))

    groups = [g for g in groups if g.items]
    # list.sort is stable: ties keep the original category order
    groups.sort(key=lambda g: g.earliest)
    return groups


def group_document(doc: Mapping[str, Any]) -> List[CategoryGroup]:
    return group_running_order(doc.get("runningOrder", []), doc.get("categories", []))


def sort_fan_zone(schedule: Union[FanZoneSchedule, Mapping[str, Any], Iterable[Any]]) -> List[Any]:
    """Fan zone items ordered by time; there is no category grouping."""
    if isinstance(schedule, FanZoneSchedule):
        items: Iterable[Any] = schedule.items
    elif isinstance(schedule, Mapping):
        items = schedule.get("items", [])
    else:
        items = schedule
    return sort_by_time(items, key=fan_zone_key)
