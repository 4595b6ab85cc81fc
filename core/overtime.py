from dataclasses import replace
from typing import Final, Optional

from .clock import MINUTE_MS
from .run import RunTask
from .timer import TimeRemaining

OVERTIME_REMINDER_INTERVAL_MINUTES: Final[int] = 5


def check_overtime_reminder(task: RunTask, time_remaining: TimeRemaining) -> Optional[int]:
    """Return the overtime minute to announce now, or None.

    Fires on every 5-minute boundary (5, 10, 15, ...) that is not yet in
    ``overtime_announced_minutes``. Callers must record the returned value
    with :func:`mark_overtime_announced`; that record is the only thing that
    keeps later ticks within the same minute from firing again.
    """
    if not time_remaining.is_overtime:
        return None
    overtime_minutes = time_remaining.overtime_ms // MINUTE_MS
    if overtime_minutes <= 0 or overtime_minutes % OVERTIME_REMINDER_INTERVAL_MINUTES != 0:
        return None
    if overtime_minutes in task.overtime_announced_minutes:
        return None
    return int(overtime_minutes)


def mark_overtime_announced(task: RunTask, minutes: int) -> RunTask:
    if minutes in task.overtime_announced_minutes:
        return task
    return replace(task, overtime_announced_minutes=task.overtime_announced_minutes + (int(minutes),))
