from .status import Pace, RunStatus, TaskStatus
from .errors import InvalidTransition, RunEngineError, TaskNotFound, TaskNotMovable, TemplateError
from .duration import Duration, duration_to_ms
from .template import Template, TemplateSubtask, TemplateTask, migrate_task_visibility, migrate_template
from .run import Run, RunSubtask, RunTask
from .derivation import derive_visible_tasks
from .run_factory import Item, create_run_from_item, create_run_from_template
from .timer import TimeRemaining, compute_remaining_time, format_time, format_time_remaining
from .overtime import check_overtime_reminder, mark_overtime_announced
from .effects import (
    Effect,
    Transition,
    EFFECT_TASK_TRANSITION,
    EFFECT_TASK_SKIPPED,
    EFFECT_ROUTINE_COMPLETE,
    EFFECT_OVERTIME_REMINDER,
    EFFECT_TIME_MILESTONE,
    EFFECT_TIME_UP,
    EFFECT_AUTO_ADVANCE_WARNING,
)
from .lifecycle import end, pause, resume, start
from .transitions import advance, extend, skip, start_task, toggle_auto_advance, toggle_subtask
from .reordering import add_quick_task, move_task

__all__ = [
    "Pace",
    "RunStatus",
    "TaskStatus",
    # Errors
    "RunEngineError",
    "InvalidTransition",
    "TaskNotFound",
    "TaskNotMovable",
    "TemplateError",
    # Models
    "Duration",
    "duration_to_ms",
    "Template",
    "TemplateSubtask",
    "TemplateTask",
    "migrate_task_visibility",
    "migrate_template",
    "Run",
    "RunSubtask",
    "RunTask",
    "Item",
    # Derivation / factory
    "derive_visible_tasks",
    "create_run_from_item",
    "create_run_from_template",
    # Timer
    "TimeRemaining",
    "compute_remaining_time",
    "format_time",
    "format_time_remaining",
    "check_overtime_reminder",
    "mark_overtime_announced",
    # Effects
    "Effect",
    "Transition",
    "EFFECT_TASK_TRANSITION",
    "EFFECT_TASK_SKIPPED",
    "EFFECT_ROUTINE_COMPLETE",
    "EFFECT_OVERTIME_REMINDER",
    "EFFECT_TIME_MILESTONE",
    "EFFECT_TIME_UP",
    "EFFECT_AUTO_ADVANCE_WARNING",
    # Transitions
    "start",
    "pause",
    "resume",
    "end",
    "start_task",
    "advance",
    "skip",
    "extend",
    "toggle_auto_advance",
    "toggle_subtask",
    "move_task",
    "add_quick_task",
]
