"""Task-level transitions within a run.

Every function takes a run snapshot and returns a new one. ``now`` is epoch
milliseconds; when omitted the wall clock is read once per call so a single
transition never observes two different instants.
"""

from dataclasses import replace
from typing import Optional

from .clock import resolve_now
from .effects import Effect, Transition
from .errors import TaskNotFound, TaskNotMovable
from .milestones import mark_milestone_announced
from .overtime import mark_overtime_announced
from .run import Run, RunTask, replace_task
from .run_factory import OPTIONAL_ITEM_TEMPLATE_ID
from .status import RunStatus, TaskStatus


def _require_task(run: Run, task_id: str) -> RunTask:
    task = run.find_task(task_id)
    if task is None:
        raise TaskNotFound(task_id)
    return task


def _timing_anchor(run: Run, now: int) -> int:
    """Instant new deadlines count from.

    While paused the clock is frozen at ``paused_at``; ``resume`` later shifts
    the active deadline by the whole pause.
    """
    if run.status == RunStatus.PAUSED and run.paused_at is not None:
        return run.paused_at
    return now


def start_task(run: Run, task_id: str, now: Optional[int] = None) -> Run:
    """Activate ``task_id`` and open its timing window.

    Does not check for another active task; callers keep at most one task
    active by only starting tasks after the previous one was finished.
    """
    now = _timing_anchor(run, resolve_now(now))
    task = _require_task(run, task_id)
    started = replace_task(
        run,
        task_id,
        status=TaskStatus.ACTIVE,
        started_at=now,
        planned_end_at=now + task.duration_ms + task.extension_ms,
    )
    return replace(started, active_task_id=task_id)


def _complete_run(run: Run, now: int) -> Transition:
    finished = replace(run, status=RunStatus.COMPLETED, active_task_id=None, ended_at=now)
    effect = Effect.routine_complete(run.template_name, single_item=run.template_id == OPTIONAL_ITEM_TEMPLATE_ID)
    return Transition(finished, (effect,))


def advance(run: Run, now: Optional[int] = None) -> Transition:
    """Complete the active task and start the next pending one.

    With no pending task left the run is completed.
    """
    now = resolve_now(now)
    current = run.active_task
    current_name = current.name if current else "Task"
    updated = run
    if current is not None:
        updated = replace_task(run, current.id, status=TaskStatus.COMPLETED, completed_at=now)

    next_task = updated.next_pending_task()
    if next_task is None:
        return _complete_run(updated, now)

    effect = Effect.task_transition(current_name, next_task.name, task_id=next_task.id)
    return Transition(start_task(updated, next_task.id, now), (effect,))


def skip(run: Run, task_id: str, now: Optional[int] = None) -> Transition:
    """Mark ``task_id`` skipped.

    Skipping the active task moves on like :func:`advance`; skipping a
    pending task only flips its status.
    """
    now = resolve_now(now)
    task = _require_task(run, task_id)
    if task.is_finished:
        raise TaskNotMovable(task_id, task.status.value)
    was_active = run.active_task_id == task_id
    updated = replace_task(run, task_id, status=TaskStatus.SKIPPED, completed_at=now)
    if not was_active:
        return Transition(updated)

    next_task = updated.next_pending_task()
    if next_task is None:
        return _complete_run(updated, now)

    effect = Effect.task_skipped(task.name, next_task.name, task_id=next_task.id)
    return Transition(start_task(updated, next_task.id, now), (effect,))


def extend(run: Run, task_id: str, delta_ms: int, now: Optional[int] = None) -> Run:
    """Give the task ``delta_ms`` of fresh time counted from ``now``.

    The deadline is reset to ``now + delta_ms`` whatever it was before, so
    "+5m" during overtime yields exactly five positive minutes. A negative
    ``delta_ms`` therefore puts the task straight into overtime.
    While the run is paused the window counts from the pause instant.
    ``extension_ms`` keeps the running total of all requests.
    """
    now = _timing_anchor(run, resolve_now(now))
    task = _require_task(run, task_id)
    return replace_task(
        run,
        task_id,
        planned_end_at=now + int(delta_ms),
        extension_ms=task.extension_ms + int(delta_ms),
        time_up_announced=False,
        overtime_announced_minutes=(),
    )


def toggle_auto_advance(run: Run, task_id: str) -> Run:
    task = _require_task(run, task_id)
    return replace_task(run, task_id, auto_advance=not task.auto_advance, auto_advance_warning_announced=False)


def toggle_subtask(run: Run, task_id: str, subtask_id: str) -> Run:
    task = _require_task(run, task_id)
    if not task.subtasks:
        return run
    subtasks = tuple(replace(st, checked=not st.checked) if st.id == subtask_id else st for st in task.subtasks)
    return replace_task(run, task_id, subtasks=subtasks)


# Announcement bookkeeping used by the tick driver.


def mark_overtime_in_run(run: Run, task_id: str, minutes: int) -> Run:
    task = _require_task(run, task_id)
    return replace_task(run, task_id, overtime_announced_minutes=mark_overtime_announced(task, minutes).overtime_announced_minutes)


def mark_milestone_in_run(run: Run, task_id: str, minutes: int) -> Run:
    task = _require_task(run, task_id)
    return replace_task(run, task_id, milestone_announced_minutes=mark_milestone_announced(task, minutes).milestone_announced_minutes)


def mark_time_up_announced(run: Run, task_id: str) -> Run:
    _require_task(run, task_id)
    return replace_task(run, task_id, time_up_announced=True)


def mark_auto_advance_warning_announced(run: Run, task_id: str) -> Run:
    _require_task(run, task_id)
    return replace_task(run, task_id, auto_advance_warning_announced=True)
