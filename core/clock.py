import time
from typing import Callable, Optional

Clock = Callable[[], int]

MINUTE_MS = 60 * 1000


def now_ms() -> int:
    """Wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def resolve_now(now: Optional[int]) -> int:
    return now_ms() if now is None else int(now)
