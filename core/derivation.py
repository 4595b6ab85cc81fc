"""Pace-based task visibility.

Pure domain logic: no I/O, receives template tasks as parameters.
"""

from typing import Iterable, List

from .status import Pace
from .template import TemplateTask, migrate_task_visibility


def is_visible_for_pace(task: TemplateTask, pace: Pace) -> bool:
    if not task.has_visibility_flags or task.low_safe is not None or task.flow_extra is not None:
        task = migrate_task_visibility(task)
    low, steady, flow = bool(task.low_included), bool(task.steady_included), bool(task.flow_included)
    if not (low or steady or flow):
        return pace == Pace.STEADY
    if pace == Pace.LOW:
        return low
    if pace == Pace.FLOW:
        return flow
    return steady


def derive_visible_tasks(tasks: Iterable[TemplateTask], pace: Pace) -> List[TemplateTask]:
    """Filter template tasks for ``pace``.

    The result is sorted by ``order`` ascending; ``order`` values are kept
    as authored (not renumbered).
    """
    pace = Pace(pace)
    visible = [task for task in tasks if is_visible_for_pace(task, pace)]
    return sorted(visible, key=lambda t: t.order)
