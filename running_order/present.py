"""Render-time preparation: token context, resolved item text, header lines."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from dateutil import parser as dtparser

from .config import load_config
from .migrate import build_document
from .models import AppData, Stadium, Team
from .tokens import TokenContext, apply_tokens

# free-text item fields that may carry tokens
TEXT_FIELDS = (
    "title",
    "description1",
    "script1",
    "script2",
    "giantScreen",
    "pitchLed",
    "ledRing",
    "ringLed",
    "graphicsProduced",
    "lights",
    "responsible",
    "notes",
    "audioOption",
)


def _find(records: list, record_id: str):
    return next((r for r in records if r.id == record_id), None) if record_id else None


def selected_stadium(doc: AppData) -> Optional[Stadium]:
    return _find(doc.competition.stadiums, doc.match_config.stadium_id or doc.selected_venue)


def resolved_teams(doc: AppData, cfg: Optional[dict] = None) -> tuple[dict, dict]:
    """Team A and B names, falling back to the configured generic labels."""
    cfg = cfg or load_config()
    generic = cfg["generic_teams"]
    out = []
    for key, team_id in (("a", doc.match_config.team_a_id), ("b", doc.match_config.team_b_id)):
        team: Optional[Team] = None if doc.match_config.use_generic_teams else _find(doc.competition.teams, team_id)
        out.append(
            {
                "name1": (team.name1 if team else "") or generic[key]["name1"],
                "name2": (team.name2 if team else "") or generic[key]["name2"],
            }
        )
    return out[0], out[1]


def build_token_context(document: Any, cfg: Optional[dict] = None) -> TokenContext:
    doc = document if isinstance(document, AppData) else build_document(document)
    stadium = selected_stadium(doc)
    team_a, team_b = resolved_teams(doc, cfg)
    competition = doc.competition
    return TokenContext(
        competition1=competition.name1,
        competition2=competition.name2 or competition.name1,
        stadium1=stadium.name1 if stadium else "",
        stadium2=(stadium.name2 or stadium.name1) if stadium else "",
        city1=stadium.city1 if stadium else "",
        city2=(stadium.city2 or stadium.city1) if stadium else "",
        team_a1=team_a["name1"],
        team_a2=team_a["name2"],
        team_b1=team_b["name1"],
        team_b2=team_b["name2"],
        match_time=doc.match_config.match_time,
    )


def present_item(item: dict, context: TokenContext, fallbacks: dict) -> dict:
    out = dict(item)
    for field in TEXT_FIELDS:
        value = apply_tokens(item.get(field, ""), context)
        if not value.strip() and field in fallbacks:
            value = fallbacks[field]
        out[field] = value
    return out


def present_items(document: Any, cfg: Optional[dict] = None) -> list[dict]:
    """Running order items with tokens resolved and blank fields filled for print."""
    cfg = cfg or load_config()
    doc = build_document(document)
    context = build_token_context(doc, cfg)
    fallbacks = cfg.get("presentation_fallbacks", {})
    return [present_item(it.dump(), context, fallbacks) for it in doc.running_order]


def team_lines(document: Any, cfg: Optional[dict] = None) -> tuple[str, str]:
    """Header lines "A vs B" in both languages; empty when a name is missing."""
    cfg = cfg or load_config()
    doc = document if isinstance(document, AppData) else build_document(document)
    team_a, team_b = resolved_teams(doc, cfg)
    seps = cfg["team_separators"]
    generic = doc.match_config.use_generic_teams
    sep1 = seps["generic_language1"] if generic else seps["language1"]
    sep2 = seps["generic_language2"] if generic else seps["language2"]
    line1 = f"{team_a['name1']}{sep1}{team_b['name1']}" if team_a["name1"] and team_b["name1"] else ""
    line2 = f"{team_a['name2']}{sep2}{team_b['name2']}" if team_a["name2"] and team_b["name2"] else ""
    return line1, line2


def format_date(value: str, fmt: str = "%d %B %Y") -> str:
    if not value:
        return ""
    try:
        dt: datetime = dtparser.isoparse(value)
    except (ValueError, OverflowError):
        return ""
    return dt.strftime(fmt)
