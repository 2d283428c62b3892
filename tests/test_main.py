import json

import pytest

from running_order.config import load_config
from running_order.main import main


def _write(path, data):
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return str(path)


def _legacy(tmp_path):
    return _write(
        tmp_path / "saved.json",
        {
            "matchConfig": {"teamAId": "team-7", "teamBId": "team-8", "stadiumId": "stadium-4"},
            "categories": [{"id": "ht", "name": "Half"}, {"id": "pre", "name": "Pre"}],
            "runningOrder": [
                {"time": "HT+00:01:00", "category": "ht", "title": "Show"},
                {"time": "+00:10:00", "category": "pre", "title": "[TeamA-L2] goal music"},
                {"time": "-00:30:00", "category": "pre", "title": "Gates"},
                {"time": "-00:20:00", "category": "pre", "title": "Hidden", "active": False},
            ],
        },
    )


def test_migrate_writes_canonical_document(tmp_path):
    out = tmp_path / "out" / "doc.json"
    main(["migrate", _legacy(tmp_path), "-o", str(out)])
    doc = json.loads(out.read_text(encoding="utf-8"))
    assert doc["dataVersion"] == 2
    assert [i["id"] for i in doc["runningOrder"]] == ["item-1", "item-2", "item-3", "item-4"]


def test_migrate_to_stdout(tmp_path, capsys):
    main(["migrate", _write(tmp_path / "empty.json", {})])
    doc = json.loads(capsys.readouterr().out)
    assert doc["dataVersion"] == 2


def test_order_groups_presented_items(tmp_path):
    out = tmp_path / "order.json"
    main(["order", _legacy(tmp_path), "-o", str(out)])
    groups = json.loads(out.read_text(encoding="utf-8"))
    assert [g["id"] for g in groups] == ["pre", "ht"]
    assert [i["title"] for i in groups[0]["items"]] == ["Gates", "Egypt goal music"]


def test_fanzone_default_schedule(capsys):
    main(["fanzone"])
    schedule = json.loads(capsys.readouterr().out)
    assert schedule["id"] == "default-nonmatchday"
    assert schedule["items"][0]["time"] == "-02:00:00"
    assert schedule["items"][-1]["time"] == "+02:30:00"


def test_fanzone_sorts_input(tmp_path, capsys):
    path = _write(tmp_path / "fz.json", {"items": [{"time": "CLOSE"}, {"time": "T-10"}, {"time": "HT END"}]})
    main(["fanzone", path])
    schedule = json.loads(capsys.readouterr().out)
    assert [i["time"] for i in schedule["items"]] == ["T-10", "HT END", "CLOSE"]


def test_validate_exit_codes(tmp_path, capsys):
    main(["validate", _legacy(tmp_path)])
    assert capsys.readouterr().out.strip().endswith("ok")

    bad = _write(tmp_path / "bad.json", {"categories": [], "runningOrder": [{"id": "x", "time": "soon"}]})
    with pytest.raises(SystemExit) as exc:
        main(["validate", bad])
    assert exc.value.code == 1
    assert "bad-time" in capsys.readouterr().out

    fz = _write(tmp_path / "fz.json", {"items": [{"time": "whenever"}]})
    with pytest.raises(SystemExit):
        main(["validate", "--fan-zone", fz])


def test_config_override(tmp_path, monkeypatch):
    override = tmp_path / "cfg.yaml"
    override.write_text("log_level: DEBUG\npresentation_fallbacks: {title: TBC}\n", encoding="utf-8")

    cfg = load_config(override)
    assert cfg["log_level"] == "DEBUG"
    assert cfg["presentation_fallbacks"] == {"title": "TBC"}
    assert cfg["generic_teams"]["a"]["name2"] == "Team 1"

    monkeypatch.setenv("RUNNING_ORDER_CONFIG", str(override))
    assert load_config()["log_level"] == "DEBUG"

    # bundled config is not affected by overrides
    monkeypatch.delenv("RUNNING_ORDER_CONFIG")
    assert load_config()["log_level"] == "INFO"


def test_config_must_be_a_mapping(tmp_path):
    bad = tmp_path / "cfg.yaml"
    bad.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(bad)
