"""Pending-queue reordering.

Queue layout invariant: after every rebuild the task list reads
``[finished tasks] + [active task] + [pending queue]`` with ``order`` set to
0..n-1. The head of the pending queue therefore always sits immediately
after the active task, which is what the ``"next"`` position relies on.
"""

from dataclasses import replace
from typing import List, Optional, Union

from .errors import InvalidTransition, TaskNotFound, TaskNotMovable
from .run import Run, RunTask, renumber
from .run_factory import IdFactory, blank_task, new_id

Position = Union[str, int]

POSITIONS = ("up", "down", "next", "end")


def rebuild_queue(run: Run, pending: List[RunTask]) -> Run:
    """Lay tasks out as finished + active + ``pending`` and renumber."""
    finished = [t for t in run.tasks if t.is_finished]
    active = [t for t in run.tasks if t.is_active]
    return replace(run, tasks=renumber(finished + active + list(pending)))


def _target_index(position: Position, current: int, count: int) -> int:
    last = count - 1
    if isinstance(position, bool):
        raise ValueError(f"Invalid position: {position!r}")
    if isinstance(position, int):
        return max(0, min(last, position))
    token = str(position).strip().lower()
    if token == "up":
        return max(0, current - 1)
    if token == "down":
        return min(last, current + 1)
    if token == "next":
        return 0
    if token == "end":
        return last
    if token.lstrip("-").isdigit():
        return max(0, min(last, int(token)))
    raise ValueError(f"Invalid position: {position!r}")


def move_task(run: Run, task_id: str, position: Position) -> Run:
    """Move a pending task within the pending queue.

    Returns ``run`` itself when the move would not change anything.
    """
    if run.status.is_terminal:
        raise InvalidTransition("reorder", run.status.value)
    task = run.find_task(task_id)
    if task is None:
        raise TaskNotFound(task_id)
    if not task.is_pending:
        raise TaskNotMovable(task_id, task.status.value)

    pending = run.pending_tasks()
    current = next(idx for idx, t in enumerate(pending) if t.id == task_id)
    target = _target_index(position, current, len(pending))
    if target == current:
        return run

    moved = pending.pop(current)
    pending.insert(target, moved)
    return rebuild_queue(run, pending)


def add_quick_task(
    run: Run,
    name: str,
    duration_ms: int,
    *,
    id_factory: IdFactory = new_id,
) -> Run:
    """Insert a new pending task at the head of the pending queue."""
    if run.status.is_terminal:
        raise InvalidTransition("add a task to", run.status.value)
    task = blank_task(name, duration_ms, id_factory=id_factory)
    return rebuild_queue(run, [task] + run.pending_tasks())


def pending_position(run: Run, task_id: str) -> Optional[int]:
    for idx, task in enumerate(run.pending_tasks()):
        if task.id == task_id:
            return idx
    return None
