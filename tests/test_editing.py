import copy

from running_order.editing import (
    add_category,
    add_item,
    category_item_counts,
    delete_category,
    delete_item,
    new_item,
    rename_category,
    set_audio_sources,
    set_item_active,
    update_item,
    with_audio_sources,
)
from running_order.grouping import group_document
from running_order.migrate import migrate


def _doc():
    return migrate(
        {
            "dataVersion": 2,
            "categories": [{"id": "pre", "name": "Pre-Match"}, {"id": "ht", "name": "Half-Time"}],
            "runningOrder": [
                {"id": "walkout", "time": "-00:05:00", "title": "Walk-out", "category": "pre"},
                {"id": "show", "time": "HT+00:02:00", "title": "Show", "category": "ht", "audioSources": ["DJ"]},
            ],
        }
    )


def _item(doc, item_id):
    return next(i for i in doc["runningOrder"] if i["id"] == item_id)


def test_new_item_gets_fresh_id_and_synced_audio():
    a = new_item({"title": "Anthem", "audioSources": ["MC Audio", "DJ"]})
    b = new_item(title="Anthem")
    assert a["id"] and b["id"] and a["id"] != b["id"]
    assert a["audioOption"] == "MC Audio, DJ" and a["audio"] is True
    assert b["audioOption"] == "No audio" and b["audio"] is False


def test_add_item_returns_new_document():
    doc = _doc()
    before = copy.deepcopy(doc)
    out = add_item(doc, {"time": "-00:30:00", "title": "Gates", "category": "pre"})
    assert doc == before
    assert len(out["runningOrder"]) == 3
    assert out["runningOrder"][-1]["title"] == "Gates"
    assert [i["title"] for i in group_document(out)[0].items] == ["Gates", "Walk-out"]


def test_update_audio_sources_resyncs_option():
    out = set_audio_sources(_doc(), "show", [])
    show = _item(out, "show")
    assert show["audioSources"] == [] and show["audio"] is False and show["audioOption"] == "No audio"

    out = set_audio_sources(out, "show", ["Microphone", "Video Audio"])
    show = _item(out, "show")
    assert show["audioOption"] == "Microphone, Video Audio" and show["audio"] is True


def test_update_legacy_audio_option_resyncs_sources():
    out = update_item(_doc(), "show", {"audioOption": "MC Audio, DJ"})
    assert _item(out, "show")["audioSources"] == ["MC Audio", "DJ"]

    out = update_item(out, "show", {"audio": False})
    show = _item(out, "show")
    assert show["audioSources"] == [] and show["audioOption"] == "No audio"


def test_update_keeps_led_ring_aliases_in_sync():
    out = update_item(_doc(), "walkout", {"ledRing": "Team colours"})
    walkout = _item(out, "walkout")
    assert walkout["ledRing"] == walkout["ringLed"] == "Team colours"


def test_update_can_clear_description_next_to_notes():
    doc = update_item(_doc(), "walkout", {"description1": "Teams line up", "notes": "op note"})
    out = update_item(doc, "walkout", {"description1": ""})
    walkout = _item(out, "walkout")
    assert walkout["description1"] == "" and walkout["notes"] == "op note"


def test_update_can_clear_led_ring():
    doc = update_item(_doc(), "walkout", {"ledRing": "Team colours"})
    walkout = _item(update_item(doc, "walkout", {"ledRing": ""}), "walkout")
    assert walkout["ledRing"] == walkout["ringLed"] == ""


def test_update_cannot_change_id_and_ignores_unknown_items():
    doc = _doc()
    out = update_item(doc, "walkout", {"id": "other", "title": "Teams out"})
    assert _item(out, "walkout")["title"] == "Teams out"
    assert update_item(doc, "missing", {"title": "x"}) == doc


def test_deactivated_item_hidden_but_still_counted():
    out = set_item_active(_doc(), "show", False)
    assert _item(out, "show")["active"] is False
    assert [g.category["id"] for g in group_document(out)] == ["pre"]
    counts = {c["id"]: n for c, n in category_item_counts(out)}
    assert counts == {"pre": 1, "ht": 1}


def test_delete_item():
    out = delete_item(_doc(), "walkout")
    assert [i["id"] for i in out["runningOrder"]] == ["show"]


def test_with_audio_sources_on_single_item():
    item = with_audio_sources({"id": "x", "audioOption": "DJ"}, ["MC Audio"])
    assert item["audioSources"] == ["MC Audio"] and item["audioOption"] == "MC Audio"


def test_add_rename_delete_category():
    doc = _doc()
    out = add_category(doc, "  Full Time ")
    out = add_category(out, "Full Time")
    assert [c["id"] for c in out["categories"]] == ["pre", "ht", "full-time", "full-time-2"]
    assert add_category(out, "   ") == out

    out = rename_category(out, "full-time", "Final Whistle")
    assert out["categories"][2]["name"] == "Final Whistle"

    kept = delete_category(out, "ht")
    assert [c["id"] for c in kept["categories"]] == ["pre", "full-time", "full-time-2"]
    assert "show" in [i["id"] for i in kept["runningOrder"]]
    assert [g.category["id"] for g in group_document(kept)] == ["pre"]

    dropped = delete_category(out, "ht", delete_items=True)
    assert [i["id"] for i in dropped["runningOrder"]] == ["walkout"]
