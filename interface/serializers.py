"""JSON views of runs for CLI output.

``run_to_dict`` is the stored snapshot (``Run.to_dict``) plus a ``view``
block with derived values: counts, the active task's timer and the pending
queue in execution order. The view is computed for a given ``now`` and is
never persisted.
"""

from typing import Any, Dict, Optional

from core import Run, RunTask, compute_remaining_time, format_time_remaining
from core.clock import resolve_now
from core.timer import TimeRemaining


def timer_to_dict(time_remaining: Optional[TimeRemaining]) -> Optional[Dict[str, Any]]:
    if time_remaining is None:
        return None
    return {
        "remainingMs": time_remaining.remaining_ms,
        "isOvertime": time_remaining.is_overtime,
        "overtimeMs": time_remaining.overtime_ms,
        "elapsedMs": time_remaining.elapsed_ms,
        "totalPlannedMs": time_remaining.total_planned_ms,
        "display": format_time_remaining(time_remaining),
    }


def task_summary(task: RunTask) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": task.id,
        "name": task.name,
        "status": task.status.value,
        "order": task.order,
        "durationMs": task.duration_ms,
    }
    if task.auto_advance:
        data["autoAdvance"] = True
    if task.subtasks:
        data["subtasks"] = [
            {"id": st.id, "text": st.text, "checked": st.checked} for st in sorted(task.subtasks, key=lambda s: s.order)
        ]
    return data


def run_view(run: Run, now: Optional[int] = None) -> Dict[str, Any]:
    now = resolve_now(now)
    active = run.active_task
    timer = None
    if active is not None:
        timer = compute_remaining_time(active, is_paused=run.is_paused, paused_at=run.paused_at, now=now)
    return {
        "counts": run.counts(),
        "activeTask": task_summary(active) if active else None,
        "timer": timer_to_dict(timer),
        "pending": [task_summary(t) for t in run.pending_tasks()],
    }


def run_to_dict(run: Run, now: Optional[int] = None, *, include_view: bool = True) -> Dict[str, Any]:
    data = run.to_dict()
    if include_view:
        data["view"] = run_view(run, now)
    return data


__all__ = ["run_to_dict", "run_view", "task_summary", "timer_to_dict"]
