import copy
import math

from running_order.grouping import group_document, group_running_order, sort_fan_zone, sort_running_order
from running_order.normalise import ensure_fan_zone_schedule


def _item(item_id, time, category, active=True):
    return {"id": item_id, "time": time, "category": category, "active": active}


def _cat(cat_id):
    return {"id": cat_id, "name": cat_id.upper()}


def test_groups_by_category_and_earliest_item():
    items = [
        _item("a", "+00:10:00", "c1"),
        _item("b", "HT+00:05:00", "c2"),
        _item("c", "-00:30:00", "c1"),
    ]
    groups = group_running_order(items, [_cat("c1"), _cat("c2")])

    assert [g.category["id"] for g in groups] == ["c1", "c2"]
    assert [i["id"] for i in groups[0].items] == ["c", "a"]
    assert groups[0].earliest == -30
    assert groups[1].earliest == 2005


def test_categories_reordered_by_time_not_definition_order():
    items = [_item("late", "FT+00:01:00", "post"), _item("early", "-01:00:00", "pre")]
    groups = group_running_order(items, [_cat("post"), _cat("pre")])
    assert [g.category["id"] for g in groups] == ["pre", "post"]


def test_inactive_items_and_their_only_category_are_hidden():
    items = [
        _item("on", "-00:10:00", "c1"),
        _item("off", "-00:20:00", "c1", active=False),
        _item("hidden", "+00:05:00", "c2", active=False),
    ]
    groups = group_running_order(items, [_cat("c1"), _cat("c2")])
    assert [g.category["id"] for g in groups] == ["c1"]
    assert [i["id"] for i in groups[0].items] == ["on"]


def test_missing_active_flag_counts_as_active():
    groups = group_running_order([{"id": "x", "time": "-00:01", "category": "c1"}], [_cat("c1")])
    assert [i["id"] for i in groups[0].items] == ["x"]


def test_dangling_category_is_omitted():
    items = [_item("a", "-00:10:00", "c1"), _item("lost", "-00:50:00", "gone"), _item("none", "-00:40:00", "")]
    groups = group_running_order(items, [_cat("c1")])
    assert [i["id"] for g in groups for i in g.items] == ["a"]


def test_ties_keep_category_and_item_order():
    items = [
        _item("x1", "+00:10:00", "c2"),
        _item("y1", "+00:10:00", "c1"),
        _item("x2", "+00:10:00", "c2"),
    ]
    groups = group_running_order(items, [_cat("c1"), _cat("c2")])
    assert [g.category["id"] for g in groups] == ["c1", "c2"]
    assert [i["id"] for i in groups[1].items] == ["x1", "x2"]


def test_unparseable_time_pushes_category_last():
    items = [_item("bad", "whenever", "c1"), _item("ok", "19:00", "c2")]
    groups = group_running_order(items, [_cat("c1"), _cat("c2")])
    assert [g.category["id"] for g in groups] == ["c2", "c1"]
    assert not math.isinf(groups[-1].earliest)


def test_inputs_are_not_modified():
    items = [_item("b", "+00:10:00", "c1"), _item("a", "-00:10:00", "c1", active=False)]
    cats = [_cat("c1")]
    before = copy.deepcopy((items, cats))
    group_running_order(items, cats)
    sort_running_order(items)
    assert (items, cats) == before


def test_sort_running_order_flat_timeline():
    items = [
        _item("abs", "19:00", "c1"),
        _item("ko", "+00:00:00", "c2"),
        _item("pre", "-00:15:00", "c1"),
        _item("off", "-01:00:00", "c1", active=False),
    ]
    assert [i["id"] for i in sort_running_order(items)] == ["pre", "ko", "abs"]


def test_group_document():
    doc = {
        "runningOrder": [_item("a", "-00:30:00", "c1")],
        "categories": [_cat("c1"), _cat("empty")],
    }
    groups = group_document(doc)
    assert len(groups) == 1 and groups[0].category["id"] == "c1"


def test_duplicate_category_id_groups_items_once():
    items = [_item("a", "-00:30:00", "c1"), _item("b", "+00:10:00", "c1")]
    groups = group_running_order(items, [_cat("c1"), _cat("c2"), {**_cat("c1"), "name": "Copy"}])
    assert len(groups) == 1
    assert groups[0].category["name"] == "C1"
    assert [i["id"] for i in groups[0].items] == ["a", "b"]


def test_sort_fan_zone_accepts_models_mappings_and_lists():
    raw = {
        "id": "md",
        "name": "Matchday",
        "items": [
            {"id": "close", "time": "CLOSE"},
            {"id": "ht", "time": "HT WINDOW"},
            {"id": "pre", "time": "T-60"},
            {"id": "ko", "time": "KO"},
        ],
    }
    expected = ["pre", "ko", "ht", "close"]
    assert [i["id"] for i in sort_fan_zone(raw)] == expected
    assert [i["id"] for i in sort_fan_zone(raw["items"])] == expected
    assert [i.id for i in sort_fan_zone(ensure_fan_zone_schedule(raw))] == expected
