"""Run-level transitions: start, pause, resume, end.

Preconditions are checked before anything is built, so an
:class:`InvalidTransition` always leaves the caller's snapshot as it was.
"""

from dataclasses import replace
from typing import Optional

from .clock import resolve_now
from .errors import InvalidTransition
from .run import Run, replace_task
from .status import RunStatus, TaskStatus
from .transitions import start_task


def start(run: Run, now: Optional[int] = None) -> Run:
    if run.status != RunStatus.NOT_STARTED:
        raise InvalidTransition("start", run.status.value)
    now = resolve_now(now)
    first = run.next_pending_task()
    if first is None:
        return replace(run, status=RunStatus.COMPLETED, started_at=now, ended_at=now)
    return start_task(replace(run, status=RunStatus.RUNNING, started_at=now), first.id, now)


def pause(run: Run, now: Optional[int] = None) -> Run:
    if run.status != RunStatus.RUNNING:
        raise InvalidTransition("pause", run.status.value)
    return replace(run, status=RunStatus.PAUSED, paused_at=resolve_now(now))


def resume(run: Run, now: Optional[int] = None) -> Run:
    """Resume a paused run, pushing the active deadline out by the pause length."""
    if run.status != RunStatus.PAUSED or run.paused_at is None:
        raise InvalidTransition("resume", run.status.value)
    now = resolve_now(now)
    pause_duration = now - run.paused_at
    updated = run
    active = run.active_task
    if active is not None and active.planned_end_at is not None:
        updated = replace_task(run, active.id, planned_end_at=active.planned_end_at + pause_duration)
    return replace(
        updated,
        status=RunStatus.RUNNING,
        total_pause_ms=run.total_pause_ms + pause_duration,
        paused_at=None,
    )


def end(run: Run, now: Optional[int] = None) -> Run:
    """Abandon the run. The active task, if any, is recorded as skipped."""
    if run.status.is_terminal:
        raise InvalidTransition("end", run.status.value)
    now = resolve_now(now)
    updated = run
    if run.active_task_id is not None and run.find_task(run.active_task_id) is not None:
        updated = replace_task(run, run.active_task_id, status=TaskStatus.SKIPPED, completed_at=now)
    return replace(updated, status=RunStatus.ABANDONED, active_task_id=None, ended_at=now)
