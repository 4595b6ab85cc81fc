import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .clock import resolve_now
from .derivation import derive_visible_tasks
from .duration import duration_to_ms
from .run import Run, RunSubtask, RunTask
from .status import Pace, RunStatus, TaskStatus
from .template import Template

IdFactory = Callable[[str], str]

OPTIONAL_ITEM_TEMPLATE_ID = "optional-item"
QUICK_TASK_TEMPLATE_ID = "quick"


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class Item:
    """An ad-hoc item that can be run as a single-task routine."""

    id: str
    title: str
    estimated_duration: Optional[str] = None
    source_id: Optional[str] = None
    subtasks: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Item":
        return cls(
            id=str(data.get("id", "") or ""),
            title=str(data.get("title", "") or ""),
            estimated_duration=data.get("estimatedDuration"),
            source_id=data.get("sourceId") or data.get("menuItemId"),
            subtasks=[str(s) for s in data.get("subtasks", []) or []],
        )


def create_run_from_template(
    template: Template,
    pace: Pace,
    *,
    now: Optional[int] = None,
    id_factory: IdFactory = new_id,
) -> Run:
    now = resolve_now(now)
    pace = Pace(pace)
    visible = derive_visible_tasks(template.tasks, pace)
    run_tasks = []
    for index, task in enumerate(visible):
        subtasks = None
        if task.subtasks is not None:
            subtasks = tuple(RunSubtask(id=st.id, text=st.text, checked=False, order=st.order) for st in task.subtasks)
        run_tasks.append(
            RunTask(
                id=id_factory("run-task"),
                template_task_id=task.id,
                name=task.name,
                duration_ms=task.duration_ms,
                order=index,
                status=TaskStatus.PENDING,
                subtasks=subtasks,
                auto_advance=task.auto_advance,
            )
        )
    return Run(
        id=id_factory(f"run-{template.id}"),
        template_id=template.id,
        template_name=template.name,
        pace=pace,
        tasks=tuple(run_tasks),
        status=RunStatus.NOT_STARTED,
        created_at=now,
    )


def create_run_from_item(
    item: Item,
    *,
    now: Optional[int] = None,
    id_factory: IdFactory = new_id,
) -> Run:
    now = resolve_now(now)
    subtasks = None
    if item.subtasks:
        subtasks = tuple(
            RunSubtask(id=f"{item.id}-subtask-{idx}", text=text, checked=False, order=idx)
            for idx, text in enumerate(item.subtasks)
        )
    task = RunTask(
        id=id_factory("optional-run-task"),
        template_task_id=item.source_id or item.id,
        name=item.title,
        duration_ms=duration_to_ms(item.estimated_duration),
        order=0,
        subtasks=subtasks,
    )
    return Run(
        id=id_factory(f"optional-run-{item.id}"),
        template_id=OPTIONAL_ITEM_TEMPLATE_ID,
        template_name=f"Optional: {item.title}",
        pace=Pace.STEADY,
        tasks=(task,),
        status=RunStatus.NOT_STARTED,
        created_at=now,
        source_item_id=item.id,
    )


def blank_task(name: str, duration_ms: int, *, id_factory: IdFactory = new_id) -> RunTask:
    """A fresh pending task with zeroed timer fields (order assigned by the caller)."""
    return RunTask(
        id=id_factory("quick-task"),
        template_task_id=QUICK_TASK_TEMPLATE_ID,
        name=name,
        duration_ms=int(duration_ms),
        order=0,
        auto_advance=False,
    )


__all__ = [
    "Item",
    "IdFactory",
    "OPTIONAL_ITEM_TEMPLATE_ID",
    "QUICK_TASK_TEMPLATE_ID",
    "blank_task",
    "create_run_from_item",
    "create_run_from_template",
    "new_id",
]
