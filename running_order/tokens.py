from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Union

from .models import Record


class TokenContext(Record):
    competition1: str = ""
    competition2: str = ""
    stadium1: str = ""
    stadium2: str = ""
    city1: str = ""
    city2: str = ""
    team_a1: str = ""
    team_a2: str = ""
    team_b1: str = ""
    team_b2: str = ""
    match_time: str = ""


# token name -> context field
TOKEN_FIELDS: Dict[str, str] = {
    "Competition1": "competition1",
    "Competition2": "competition2",
    "Stadium1": "stadium1",
    "Stadium2": "stadium2",
    "City1": "city1",
    "City2": "city2",
    "TeamA1": "team_a1",
    "TeamA2": "team_a2",
    "TeamB1": "team_b1",
    "TeamB2": "team_b2",
    "MatchTime": "match_time",
    # L1 = primary language, L2 = secondary
    "Competition-L1": "competition1",
    "Competition-L2": "competition2",
    "Stadium-L1": "stadium1",
    "Stadium-L2": "stadium2",
    "City-L1": "city1",
    "City-L2": "city2",
    "TeamA-L1": "team_a1",
    "TeamA-L2": "team_a2",
    "TeamB-L1": "team_b1",
    "TeamB-L2": "team_b2",
    # legacy, language 1
    "Competition": "competition1",
    "Stadium": "stadium1",
    "City": "city1",
    "TeamA": "team_a1",
    "TeamB": "team_b1",
}

_TOKEN_RE = re.compile(r"\[([A-Za-z0-9-]+)\]")

ContextLike = Union[TokenContext, Mapping[str, Any]]


def as_context(context: ContextLike) -> TokenContext:
    if isinstance(context, TokenContext):
        return context
    values = {k: ("" if v is None else str(v)) for k, v in dict(context).items()}
    return TokenContext.model_validate(values)


def apply_tokens(text: str, context: ContextLike) -> str:
    """Replace ``[Token]`` placeholders with context values.

    Every bracketed token is resolved independently in a single pass, so
    ``[TeamA]`` and ``[TeamA1]`` never interfere and substituted values are
    not expanded again. Tokens whose value is empty are left as written.
    """
    if not text:
        return ""
    ctx = as_context(context)

    def _sub(m: re.Match) -> str:
        field = TOKEN_FIELDS.get(m.group(1))
        if field is None:
            return m.group(0)
        value = getattr(ctx, field)
        return value if value else m.group(0)

    return _TOKEN_RE.sub(_sub, text)


def find_tokens(text: str) -> List[str]:
    """Known tokens used in text, in order of appearance."""
    if not text:
        return []
    return [m.group(1) for m in _TOKEN_RE.finditer(text) if m.group(1) in TOKEN_FIELDS]


def unresolved_tokens(text: str, context: ContextLike) -> List[str]:
    ctx = as_context(context)
    return [tok for tok in find_tokens(text) if not getattr(ctx, TOKEN_FIELDS[tok])]
