"""Coercion of loosely typed records into canonical models.

Every ``ensure_*`` function is total: missing values get defaults, wrong
types are stringified, legacy field names are read when the canonical one is
absent. None of them raise or mutate their input.
"""

from __future__ import annotations

import unicodedata
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from . import config
from .models import (
    FAN_ZONE_ITEM_TYPES,
    MATERIAL_TYPES,
    Branding,
    Competition,
    FanZoneItem,
    FanZoneSchedule,
    FanZoneScreens,
    MatchConfig,
    RunningOrderCategory,
    RunningOrderItem,
    Stadium,
    Team,
)
from .utils import first_key, first_present

NO_AUDIO = "No audio"
GENERIC_AUDIO_SOURCE = "Audio"

# Canonical field -> candidate names. The canonical name wins whenever it is
# set, even to "", so a cleared field is not refilled from a fallback.
ITEM_ALIASES = {
    "description1": ("description1", "notes"),
    "script1": ("script1", "script"),
    "ledRing": ("ledRing", "ringLed"),
    "ringLed": ("ringLed", "ledRing"),
}
STADIUM_ALIASES = {
    "name1": ("name1", "name"),
    "name2": ("name2", "name1", "name"),
    "city1": ("city1", "city"),
    "city2": ("city2", "city1", "city"),
}
COMPETITION_ALIASES = {
    "name1": ("name1", "name"),
    "name2": ("name2", "name1", "name"),
}


def text(value: Any, default: str = "") -> str:
    """Best-effort string: None -> default, booleans lowercase, integral floats without '.0'."""
    if value is None:
        return default
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def pick(x: Mapping[str, Any], *keys: str, default: str = "") -> str:
    return text(first_key(x, *keys), default)


def pick_set(x: Mapping[str, Any], *keys: str, default: str = "") -> str:
    return text(first_present(x, *keys), default)


def flag(value: Any, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def listing(value: Any) -> list:
    return list(value) if isinstance(value, (list, tuple)) else []


def strip_diacritics(s: str) -> str:
    return "".join(c for c in unicodedata.normalize("NFD", s) if not unicodedata.combining(c))


def norm_name(s: str) -> str:
    return " ".join(strip_diacritics(s).casefold().split())


# Audio

def split_audio_option(option: Any) -> List[str]:
    if not isinstance(option, str):
        return []
    option = option.strip()
    if not option or option.lower() == NO_AUDIO.lower():
        return []
    return [s.strip() for s in option.split(",") if s.strip()]


def audio_option_for(sources: Sequence[str]) -> str:
    return ", ".join(sources) if sources else NO_AUDIO


def reconcile_audio(sources: Any, audio_option: Any = None, audio: Any = None) -> Tuple[List[str], bool, str]:
    """Derive (audioSources, audio, audioOption) from whichever fields are set.

    Explicit sources win, then the legacy comma separated audioOption, then
    a generic source when the legacy boolean is true.
    """
    out = [text(s) for s in listing(sources)]
    out = [s for s in out if s]
    if not out:
        out = split_audio_option(audio_option)
    if not out and audio is True:
        out = [GENERIC_AUDIO_SOURCE]
    return out, bool(out), audio_option_for(out)


# Reference data

def _names(raw: Mapping[str, Any], fields: Iterable[str]) -> set[str]:
    return {norm_name(text(raw.get(f))) for f in fields if text(raw.get(f)).strip()}


def match_reference(
    record_id: Optional[str],
    raw: Mapping[str, Any],
    reference: Sequence[Mapping[str, Any]],
) -> Optional[Mapping[str, Any]]:
    """Find the canonical record for raw: by explicit id, then by any name in either language."""
    if record_id:
        for ref in reference:
            if ref["id"] == record_id:
                return ref
    incoming = _names(raw, ("name", "name1", "name2"))
    if not incoming:
        return None
    for ref in reference:
        if _names(ref, ("name1", "name2")) & incoming:
            return ref
    return None


def ensure_stadium(raw: Any, index: int, reference: Optional[Sequence[Mapping[str, Any]]] = None) -> Stadium:
    reference = reference if reference is not None else config.default_stadiums()
    if not raw:
        return Stadium(**reference[min(index, len(reference) - 1)])
    if isinstance(raw, str):
        raw = {"name": raw}
    raw = mapping(raw)

    explicit_id = pick(raw, "id")
    base = Stadium(
        id=explicit_id or f"custom-stadium-{index + 1}",
        **{field: pick(raw, *aliases) for field, aliases in STADIUM_ALIASES.items()},
    )
    # Recognised venues snap to canonical bilingual naming; custom ones pass through.
    match = match_reference(explicit_id, raw, reference)
    if match:
        return base.model_copy(
            update={k: match[k] for k in ("name1", "name2", "city1", "city2")}
        )
    return base


def ensure_team(raw: Any, index: int, reference: Optional[Sequence[Mapping[str, Any]]] = None) -> Team:
    reference = reference if reference is not None else config.default_teams()
    if not raw:
        return Team(**reference[min(index, len(reference) - 1)])
    if isinstance(raw, str):
        raw = {"name": raw}
    raw = mapping(raw)

    explicit_id = pick(raw, "id")
    name = pick(raw, "name1", "name2", "name")
    base = Team(
        id=explicit_id or f"custom-team-{index + 1}",
        name1=name,
        name2=pick(raw, "name2", default=name),
    )
    match = match_reference(explicit_id, raw, reference)
    if match:
        return base.model_copy(update={"name1": match["name1"], "name2": match["name2"]})
    return base


def ensure_competition(raw: Any) -> Competition:
    c = mapping(raw)
    defaults = config.default_competition()
    stadium_ref = config.default_stadiums()
    team_ref = config.default_teams()

    # stadiums, then legacy venues, then bundled defaults
    stadiums_raw = listing(c.get("stadiums"))
    venues_raw = listing(c.get("venues"))
    if stadiums_raw:
        stadiums = [ensure_stadium(s, i, stadium_ref) for i, s in enumerate(stadiums_raw)]
    elif venues_raw:
        stadiums = []
        for i, v in enumerate(venues_raw):
            v = {"name": v} if isinstance(v, str) else mapping(v)
            legacy = {"id": v.get("id"), "name1": v.get("name"), "city1": v.get("city")}
            stadiums.append(ensure_stadium(legacy, i, stadium_ref))
    else:
        stadiums = [Stadium(**s) for s in stadium_ref]

    teams_raw = listing(c.get("teams"))
    if teams_raw:
        teams = [ensure_team(t, i, team_ref) for i, t in enumerate(teams_raw)]
    else:
        teams = [Team(**t) for t in team_ref]

    name1 = pick(c, *COMPETITION_ALIASES["name1"], default=defaults["name"])
    branding = mapping(c.get("branding"))
    logo_data_url = pick(c, "logoDataUrl", default=pick(branding, "logo", default=defaults["logo"]))

    return Competition(
        name1=name1,
        name2=pick(c, *COMPETITION_ALIASES["name2"], default=name1),
        name=pick(c, "name", default=name1),
        start_date=pick(c, "startDate", default=defaults["start_date"]),
        end_date=pick(c, "endDate", default=defaults["end_date"]),
        logo_data_url=logo_data_url,
        stadiums=stadiums,
        teams=teams,
        branding=Branding(
            logo=pick(branding, "logo", default=logo_data_url),
            primary_color=pick(branding, "primaryColor", default=defaults["primary_color"]),
            secondary_color=pick(branding, "secondaryColor", default=defaults["secondary_color"]),
        ),
    )


def _material_type(item: Mapping[str, Any]) -> str:
    value = item.get("materialType")
    if value in MATERIAL_TYPES:
        return value
    # infer from legacy fields
    if item.get("audioOption") == "Audio":
        return "Audio"
    if item.get("videoType"):
        return "Video"
    return "Other"


def ensure_item(raw: Any, index: int) -> RunningOrderItem:
    item = mapping(raw)

    sources, audio, audio_option = reconcile_audio(
        item.get("audioSources"), item.get("audioOption"), item.get("audio")
    )
    video_type = pick(item, "videoType")
    loop = flag(item.get("loop"), video_type == "Loop")

    return RunningOrderItem(
        id=pick(item, "id", default=f"item-{index + 1}"),
        time=pick(item, "time"),
        title=pick(item, "title"),
        description1=pick_set(item, *ITEM_ALIASES["description1"]),
        material_type=_material_type(item),
        audio=audio,
        responsible=pick(item, "responsible"),
        loop=loop,
        script1=pick_set(item, *ITEM_ALIASES["script1"]),
        script2=pick(item, "script2"),
        giant_screen=pick(item, "giantScreen"),
        pitch_led=pick(item, "pitchLed"),
        led_ring=pick_set(item, *ITEM_ALIASES["ledRing"]),
        ring_led=pick_set(item, *ITEM_ALIASES["ringLed"]),
        graphics_produced=pick(item, "graphicsProduced"),
        lights=pick(item, "lights"),
        duration=pick(item, "duration"),
        notes=pick(item, "notes"),
        audio_option=audio_option,
        audio_sources=sources,
        video_type=video_type or ("Loop" if loop else "One Play"),
        category=pick(item, "category"),
        active=flag(item.get("active"), True),
    )


def ensure_category(raw: Any, index: int, item_start_index: int) -> RunningOrderCategory:
    category = mapping(raw)
    items = listing(category.get("items"))
    return RunningOrderCategory(
        id=pick(category, "id", default=f"category-{index + 1}"),
        name=pick(category, "name"),
        items=[ensure_item(it, item_start_index + i) for i, it in enumerate(items)],
    )


def ensure_match_config(raw: Any) -> MatchConfig:
    cfg = mapping(raw)
    return MatchConfig(
        team_a_id=pick(cfg, "teamAId"),
        team_b_id=pick(cfg, "teamBId"),
        stadium_id=pick(cfg, "stadiumId"),
        match_time=pick(cfg, "matchTime"),
        extra_notes=pick(cfg, "extraNotes"),
        use_generic_teams=cfg.get("useGenericTeams") is True,
    )


def ensure_fan_zone_item(raw: Any, index: int) -> FanZoneItem:
    item = mapping(raw)
    screens = mapping(item.get("screens"))
    kind = item.get("type")
    return FanZoneItem(
        id=pick(item, "id", default=f"fz-{index + 1}"),
        type=kind if kind in FAN_ZONE_ITEM_TYPES else "music",
        time=pick(item, "time"),
        title=pick(item, "title"),
        screens=FanZoneScreens(
            screen1=pick(screens, "screen1"),
            screen2=pick(screens, "screen2"),
            screen3=pick(screens, "screen3"),
        ),
        notes=pick(item, "notes"),
    )


def ensure_fan_zone_schedule(raw: Any) -> FanZoneSchedule:
    """Canonical fan zone schedule; anything that is not a mapping yields the bundled default."""
    if not isinstance(raw, Mapping):
        raw = config.default_non_matchday_schedule()
    date = raw.get("date")
    return FanZoneSchedule(
        id=pick(raw, "id", default="fan-zone"),
        name=pick(raw, "name", default="Fan Zone Schedule"),
        date=text(date) if date not in (None, "") else None,
        items=[ensure_fan_zone_item(it, i) for i, it in enumerate(listing(raw.get("items")))],
    )
