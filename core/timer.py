"""Timer arithmetic for a single run task.

All values are derived from absolute timestamps (``started_at``,
``planned_end_at``) rather than accumulated ticks, so polling frequency has
no effect on the result.
"""

from dataclasses import dataclass
from typing import Optional

from .clock import resolve_now
from .run import RunTask


@dataclass(frozen=True)
class TimeRemaining:
    """Timer state for one task at a reference instant.

    Attributes:
        remaining_ms: milliseconds until the planned end (negative in overtime)
        is_overtime: True once the planned end has passed
        overtime_ms: milliseconds past the planned end (0 when not overtime)
        elapsed_ms: milliseconds since the task started
        total_planned_ms: duration plus all extensions
        total_ms: same as remaining_ms
    """

    remaining_ms: int
    is_overtime: bool
    overtime_ms: int
    elapsed_ms: int
    total_planned_ms: int
    total_ms: int


def compute_remaining_time(
    task: RunTask,
    is_paused: bool = False,
    paused_at: Optional[int] = None,
    now: Optional[int] = None,
) -> Optional[TimeRemaining]:
    if task.started_at is None or task.planned_end_at is None:
        return None
    reference = paused_at if is_paused and paused_at else resolve_now(now)
    elapsed_ms = reference - task.started_at
    remaining_ms = task.planned_end_at - reference
    is_overtime = remaining_ms < 0
    return TimeRemaining(
        remaining_ms=remaining_ms,
        is_overtime=is_overtime,
        overtime_ms=-remaining_ms if is_overtime else 0,
        elapsed_ms=elapsed_ms,
        total_planned_ms=task.duration_ms + task.extension_ms,
        total_ms=remaining_ms,
    )


def format_time(ms: int) -> str:
    """Render ``ms`` as ``M:SS``. The sign is dropped."""
    total_seconds = abs(int(ms)) // 1000
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes}:{seconds:02d}"


def format_time_remaining(time_remaining: TimeRemaining) -> str:
    if time_remaining.is_overtime:
        return f"+{format_time(time_remaining.overtime_ms)}"
    return format_time(time_remaining.remaining_ms)
