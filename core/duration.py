"""Estimated durations for ad-hoc items.

Items carry a coarse estimate such as ``"~15 min"``. The closed set of
estimates the app offers lives in :class:`Duration`; free-form strings of
the shape ``~<integer> <unit>`` are also accepted. Anything else falls back
to :data:`DEFAULT_DURATION_MS` and never raises.
"""

from enum import Enum
from typing import Dict, Final, Optional, Union

from .clock import MINUTE_MS


class Duration(str, Enum):
    MIN_5 = "~5 min"
    MIN_10 = "~10 min"
    MIN_15 = "~15 min"
    MIN_25 = "~25 min"
    MIN_30 = "~30 min"
    MIN_45 = "~45 min"
    HOUR_1 = "~1 hour"
    HOUR_2 = "~2 hours"


DURATION_MS: Final[Dict[Duration, int]] = {
    Duration.MIN_5: 5 * MINUTE_MS,
    Duration.MIN_10: 10 * MINUTE_MS,
    Duration.MIN_15: 15 * MINUTE_MS,
    Duration.MIN_25: 25 * MINUTE_MS,
    Duration.MIN_30: 30 * MINUTE_MS,
    Duration.MIN_45: 45 * MINUTE_MS,
    Duration.HOUR_1: 60 * MINUTE_MS,
    Duration.HOUR_2: 120 * MINUTE_MS,
}

DEFAULT_DURATION_MS: Final[int] = DURATION_MS[Duration.MIN_15]

_UNIT_MS: Final[Dict[str, int]] = {
    "min": MINUTE_MS,
    "mins": MINUTE_MS,
    "minute": MINUTE_MS,
    "minutes": MINUTE_MS,
    "hour": 60 * MINUTE_MS,
    "hours": 60 * MINUTE_MS,
}


def _parse_free_form(text: str) -> Optional[int]:
    token = text.strip()
    if not token.startswith("~"):
        return None
    parts = token[1:].split()
    if len(parts) != 2:
        return None
    amount, unit = parts
    if not amount.isdigit():
        return None
    unit_ms = _UNIT_MS.get(unit.lower())
    if unit_ms is None:
        return None
    return int(amount) * unit_ms


def duration_to_ms(value: Union[Duration, str, None]) -> int:
    if value is None:
        return DEFAULT_DURATION_MS
    if isinstance(value, Duration):
        return DURATION_MS[value]
    text = str(value).strip()
    try:
        return DURATION_MS[Duration(text)]
    except ValueError:
        pass
    parsed = _parse_free_form(text)
    return parsed if parsed is not None else DEFAULT_DURATION_MS


def minutes_to_ms(minutes: Union[int, float]) -> int:
    return int(round(float(minutes) * MINUTE_MS))
