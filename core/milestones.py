"""Threshold checks evaluated on every tick besides overtime reminders.

Each check is a pure predicate over a task and its :class:`TimeRemaining`;
the announcement flags on :class:`RunTask` make each threshold fire once.
"""

from dataclasses import replace
from typing import Final, Optional

from .clock import MINUTE_MS
from .run import RunTask
from .timer import TimeRemaining

MILESTONE_INTERVALS: Final[tuple] = (1, 5)
AUTO_ADVANCE_WARNING_MS: Final[int] = MINUTE_MS
# guards against firing on the tick that started the task
AUTO_ADVANCE_MIN_ELAPSED_MS: Final[int] = 1000


def check_time_milestone(task: RunTask, time_remaining: TimeRemaining, interval_minutes: int) -> Optional[int]:
    if interval_minutes <= 0:
        return None
    elapsed_minutes = max(0, time_remaining.elapsed_ms) // MINUTE_MS
    milestone = (elapsed_minutes // interval_minutes) * interval_minutes
    if milestone < interval_minutes:
        return None
    if milestone in task.milestone_announced_minutes:
        return None
    return int(milestone)


def mark_milestone_announced(task: RunTask, minutes: int) -> RunTask:
    if minutes in task.milestone_announced_minutes:
        return task
    return replace(task, milestone_announced_minutes=task.milestone_announced_minutes + (int(minutes),))


def should_announce_time_up(task: RunTask, time_remaining: TimeRemaining) -> bool:
    """Time-up is announced once for tasks that will not auto-advance."""
    return not task.auto_advance and not task.time_up_announced and time_remaining.remaining_ms <= 0


def should_warn_auto_advance(task: RunTask, time_remaining: TimeRemaining, has_next: bool) -> bool:
    return (
        task.auto_advance
        and not task.auto_advance_warning_announced
        and has_next
        and 0 < time_remaining.remaining_ms <= AUTO_ADVANCE_WARNING_MS
    )


def should_auto_advance(task: RunTask, time_remaining: TimeRemaining) -> bool:
    """True once an auto-advance task has run out of time.

    Advancing changes the active task, so this fires once per task. A task
    switched to auto-advance after its deadline advances on the next tick.
    """
    if not task.auto_advance:
        return False
    if time_remaining.elapsed_ms < AUTO_ADVANCE_MIN_ELAPSED_MS:
        return False
    return time_remaining.remaining_ms <= 0
