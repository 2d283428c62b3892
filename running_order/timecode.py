"""Event-relative time codes and their sort keys.

Two dialects are in use:

* running order (matchday): ``-HH:MM[:SS]`` before kick-off, ``+HH:MM[:SS]``
  after kick-off, ``HT+``/``FT+`` prefixed offsets and bare absolute clock
  times. Each form lives in its own numeric band so that every value of an
  earlier band sorts before every value of a later one.
* fan zone (perpetual and non-matchday schedules): ``T-<n>``/``T+<n>`` minute
  offsets, signed clock offsets and named markers such as ``KO``,
  ``HT WINDOW`` or ``CLOSE``.

Key functions never raise. Unrecognised input gets a sentinel so it sorts
last; the ``parse_*`` functions return ``None`` instead for callers that
want to validate at entry time.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Iterable, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Running order bands
AFTER_KICKOFF_BAND = 1000
HALF_TIME_BAND = 2000
FULL_TIME_BAND = 3000
ABSOLUTE_BAND = 4000
BAND_WIDTH = 1000
RUNNING_ORDER_UNRECOGNISED = 99999

# Fan zone bands
FAN_ZONE_HT = 10000
FAN_ZONE_FT = 20000
FAN_ZONE_INTER_MATCH = 30000
FAN_ZONE_CLOSE = 40000
FAN_ZONE_FULL_TIME_MINUTE = 90
FAN_ZONE_UNRECOGNISED = 99999

_CLOCK = r"(\d{1,2}):(\d{2})(?::(\d{2}))?"

_RO_PATTERNS = (
    (re.compile(rf"^-{_CLOCK}$"), None),
    (re.compile(rf"^\+{_CLOCK}$"), AFTER_KICKOFF_BAND),
    (re.compile(rf"^HT\+{_CLOCK}$", re.I), HALF_TIME_BAND),
    (re.compile(rf"^FT\+{_CLOCK}$", re.I), FULL_TIME_BAND),
    (re.compile(rf"^{_CLOCK}$"), ABSOLUTE_BAND),
)

_FZ_HT_RE = re.compile(rf"^HT\s*([+-])?\s*{_CLOCK}$")
_FZ_FT_RE = re.compile(rf"^FT\s*([+-])?\s*{_CLOCK}$")
_FZ_FT_MINUTES_RE = re.compile(r"^FT\s*([+-])\s*(\d+)$")
_FZ_OFFSET_RE = re.compile(rf"^([+-])?{_CLOCK}$")
_FZ_T_RE = re.compile(r"^T\s*([+-])\s*(\d+)$")
_FZ_AFTER_FT_RE = re.compile(r"^\+\s*(\d+)$")

_FZ_MARKERS = {
    "KO": 0,
    "KICK-OFF": 0,
    "KICK OFF": 0,
    "HT": FAN_ZONE_HT,
    "HT START": FAN_ZONE_HT,
    "HT WINDOW": FAN_ZONE_HT + 5,
    "HT END": FAN_ZONE_HT + 10,
    "FT": FAN_ZONE_FT,
    "INTER-MATCH": FAN_ZONE_INTER_MATCH,
    "INTER MATCH": FAN_ZONE_INTER_MATCH,
    "CLOSE": FAN_ZONE_CLOSE,
}


def _minutes(hours: str, minutes: str) -> int:
    return int(hours) * 60 + int(minutes)


def parse_running_order_time(text: Any) -> Optional[int]:
    """Return the sort key of a running order time, or None when unrecognised."""
    if not isinstance(text, str):
        return None
    s = text.strip()
    for pattern, band in _RO_PATTERNS:
        m = pattern.match(s)
        if not m:
            continue
        mins = _minutes(m.group(1), m.group(2))
        if band is None:
            return -mins
        if band == ABSOLUTE_BAND:
            # last band: a full day still sits below the sentinel
            return band + mins
        # cap relative offsets so bands never overlap
        return band + min(mins, BAND_WIDTH - 1)
    return None


def running_order_key(text: Any) -> int:
    key = parse_running_order_time(text)
    if key is None:
        logger.debug("unrecognised running order time %r", text)
        return RUNNING_ORDER_UNRECOGNISED
    return key


def is_running_order_time(text: Any) -> bool:
    return parse_running_order_time(text) is not None


def parse_fan_zone_time(text: Any) -> Optional[int]:
    """Return the sort key of a fan zone time, or None when unrecognised."""
    if not isinstance(text, str):
        return None
    s = " ".join(text.strip().upper().split())
    if not s:
        return None

    if s in _FZ_MARKERS:
        return _FZ_MARKERS[s]

    if s.startswith("HT"):
        m = _FZ_HT_RE.match(s)
        if m:
            sign = -1 if m.group(1) == "-" else 1
            return FAN_ZONE_HT + sign * _minutes(m.group(2), m.group(3))
        if "START" in s:
            return FAN_ZONE_HT
        if "WINDOW" in s:
            return FAN_ZONE_HT + 5
        if "END" in s:
            return FAN_ZONE_HT + 10
        return None

    if s.startswith("FT"):
        m = _FZ_FT_RE.match(s)
        if m:
            sign = -1 if m.group(1) == "-" else 1
            return FAN_ZONE_FT + sign * _minutes(m.group(2), m.group(3))
        m = _FZ_FT_MINUTES_RE.match(s)
        if m:
            sign = -1 if m.group(1) == "-" else 1
            return FAN_ZONE_FT + sign * int(m.group(2))
        return None

    m = _FZ_OFFSET_RE.match(s)
    if m:
        sign = -1 if m.group(1) == "-" else 1
        return sign * _minutes(m.group(2), m.group(3))

    m = _FZ_T_RE.match(s)
    if m:
        sign = -1 if m.group(1) == "-" else 1
        return sign * int(m.group(2))

    if "KICK" in s:
        return 0

    # "+15": minutes after a 90 minute full time
    m = _FZ_AFTER_FT_RE.match(s)
    if m:
        return FAN_ZONE_FULL_TIME_MINUTE + int(m.group(1))

    return None


def fan_zone_key(text: Any) -> int:
    key = parse_fan_zone_time(text)
    if key is None:
        logger.debug("unrecognised fan zone time %r", text)
        return FAN_ZONE_UNRECOGNISED
    return key


def is_fan_zone_time(text: Any) -> bool:
    return parse_fan_zone_time(text) is not None


def _time_of(item: Any) -> Any:
    if isinstance(item, dict):
        return item.get("time", "")
    return getattr(item, "time", "")


def sort_by_time(items: Iterable[T], key: Callable[[Any], int] = running_order_key) -> List[T]:
    """Stable sort of items (dicts or models) by their ``time`` field."""
    return sorted(items, key=lambda item: key(_time_of(item)))


def format_time(text: str) -> str:
    """Pad absolute clock times to HH:MM:SS; relative forms are returned as-is."""
    if not text:
        return ""
    if text.startswith(("-", "+", "HT+", "FT+")):
        return text
    parts = text.split(":")
    if len(parts) == 2:
        return f"{parts[0].zfill(2)}:{parts[1].zfill(2)}:00"
    if len(parts) == 3:
        return ":".join(p.zfill(2) for p in parts)
    return text
