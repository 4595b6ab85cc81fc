"""Run snapshots.

A :class:`Run` is an immutable value. Engine operations never mutate a run;
they build a new one with :func:`dataclasses.replace` and hand it back, so a
snapshot held by a caller always stays internally consistent.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .status import Pace, RunStatus, TaskStatus


@dataclass(frozen=True)
class RunSubtask:
    id: str
    text: str
    checked: bool = False
    order: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "text": self.text, "checked": self.checked, "order": self.order}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunSubtask":
        return cls(
            id=str(data.get("id", "") or ""),
            text=str(data.get("text", "") or ""),
            checked=bool(data.get("checked", False)),
            order=int(data.get("order", 0) or 0),
        )


@dataclass(frozen=True)
class RunTask:
    """Execution state of one task inside a run.

    Attributes:
        started_at: epoch ms when timing began (None until started)
        planned_end_at: epoch ms deadline for the current timing window
        extension_ms: cumulative record of every extend request
        overtime_announced_minutes: overtime boundaries already announced
        milestone_announced_minutes: elapsed-time milestones already announced
    """

    id: str
    template_task_id: str
    name: str
    duration_ms: int
    order: int
    status: TaskStatus = TaskStatus.PENDING
    subtasks: Optional[Tuple[RunSubtask, ...]] = None
    started_at: Optional[int] = None
    planned_end_at: Optional[int] = None
    extension_ms: int = 0
    completed_at: Optional[int] = None
    overtime_announced_minutes: Tuple[int, ...] = ()
    milestone_announced_minutes: Tuple[int, ...] = ()
    auto_advance: bool = False
    auto_advance_warning_announced: bool = False
    time_up_announced: bool = False

    @property
    def is_pending(self) -> bool:
        return self.status == TaskStatus.PENDING

    @property
    def is_active(self) -> bool:
        return self.status == TaskStatus.ACTIVE

    @property
    def is_finished(self) -> bool:
        return self.status.is_terminal

    @property
    def total_planned_ms(self) -> int:
        return self.duration_ms + self.extension_ms

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "templateTaskId": self.template_task_id,
            "name": self.name,
            "durationMs": self.duration_ms,
            "status": self.status.value,
            "order": self.order,
            "startedAt": self.started_at,
            "plannedEndAt": self.planned_end_at,
            "extensionMs": self.extension_ms,
            "completedAt": self.completed_at,
            "overtimeAnnouncedMinutes": list(self.overtime_announced_minutes),
            "milestoneAnnouncedMinutes": list(self.milestone_announced_minutes),
            "autoAdvance": self.auto_advance,
            "autoAdvanceWarningAnnounced": self.auto_advance_warning_announced,
            "timeUpAnnounced": self.time_up_announced,
        }
        if self.subtasks is not None:
            data["subtasks"] = [st.to_dict() for st in self.subtasks]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunTask":
        raw_subtasks = data.get("subtasks")
        subtasks = None
        if isinstance(raw_subtasks, list):
            subtasks = tuple(RunSubtask.from_dict(st) for st in raw_subtasks if isinstance(st, dict))
        return cls(
            id=str(data.get("id", "") or ""),
            template_task_id=str(data.get("templateTaskId", "") or ""),
            name=str(data.get("name", "") or ""),
            duration_ms=int(data.get("durationMs", 0) or 0),
            order=int(data.get("order", 0) or 0),
            status=TaskStatus.from_string(data.get("status", "pending")),
            subtasks=subtasks,
            started_at=_opt_int(data.get("startedAt")),
            planned_end_at=_opt_int(data.get("plannedEndAt")),
            extension_ms=int(data.get("extensionMs", 0) or 0),
            completed_at=_opt_int(data.get("completedAt")),
            overtime_announced_minutes=tuple(int(m) for m in data.get("overtimeAnnouncedMinutes", []) or []),
            milestone_announced_minutes=tuple(int(m) for m in data.get("milestoneAnnouncedMinutes", []) or []),
            auto_advance=bool(data.get("autoAdvance", False)),
            auto_advance_warning_announced=bool(data.get("autoAdvanceWarningAnnounced", False)),
            time_up_announced=bool(data.get("timeUpAnnounced", False)),
        )


@dataclass(frozen=True)
class Run:
    id: str
    template_id: str
    template_name: str
    pace: Pace
    tasks: Tuple[RunTask, ...] = field(default_factory=tuple)
    status: RunStatus = RunStatus.NOT_STARTED
    created_at: int = 0
    started_at: Optional[int] = None
    paused_at: Optional[int] = None
    total_pause_ms: int = 0
    ended_at: Optional[int] = None
    active_task_id: Optional[str] = None
    source_item_id: Optional[str] = None

    @property
    def is_paused(self) -> bool:
        return self.status == RunStatus.PAUSED

    @property
    def is_finished(self) -> bool:
        return self.status.is_terminal

    @property
    def active_task(self) -> Optional[RunTask]:
        if self.active_task_id is None:
            return None
        return self.find_task(self.active_task_id)

    def find_task(self, task_id: str) -> Optional[RunTask]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def pending_tasks(self) -> List[RunTask]:
        """Pending tasks in queue order (ascending ``order``)."""
        return sorted((t for t in self.tasks if t.is_pending), key=lambda t: t.order)

    def next_pending_task(self) -> Optional[RunTask]:
        pending = self.pending_tasks()
        return pending[0] if pending else None

    def counts(self) -> Dict[str, int]:
        totals = {status.value: 0 for status in TaskStatus}
        for task in self.tasks:
            totals[task.status.value] += 1
        totals["total"] = len(self.tasks)
        return totals

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "templateId": self.template_id,
            "templateName": self.template_name,
            "pace": self.pace.value,
            "tasks": [t.to_dict() for t in self.tasks],
            "status": self.status.value,
            "createdAt": self.created_at,
            "startedAt": self.started_at,
            "pausedAt": self.paused_at,
            "totalPauseMs": self.total_pause_ms,
            "endedAt": self.ended_at,
            "activeTaskId": self.active_task_id,
        }
        if self.source_item_id is not None:
            data["sourceItemId"] = self.source_item_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Run":
        # older snapshots stored the pace under "energyMode"
        pace_raw = data.get("pace") or data.get("energyMode") or "steady"
        return cls(
            id=str(data.get("id", "") or ""),
            template_id=str(data.get("templateId", "") or ""),
            template_name=str(data.get("templateName", "") or ""),
            pace=Pace.from_string(str(pace_raw)),
            tasks=tuple(RunTask.from_dict(t) for t in data.get("tasks", []) or [] if isinstance(t, dict)),
            status=RunStatus.from_string(data.get("status", "notStarted")),
            created_at=int(data.get("createdAt", 0) or 0),
            started_at=_opt_int(data.get("startedAt")),
            paused_at=_opt_int(data.get("pausedAt")),
            total_pause_ms=int(data.get("totalPauseMs", 0) or 0),
            ended_at=_opt_int(data.get("endedAt")),
            active_task_id=data.get("activeTaskId") or None,
            source_item_id=data.get("sourceItemId") or None,
        )


def _opt_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


def replace_task(run: Run, task_id: str, **changes: Any) -> Run:
    """Return ``run`` with the named task replaced by an updated copy."""
    return replace(
        run,
        tasks=tuple(replace(t, **changes) if t.id == task_id else t for t in run.tasks),
    )


def renumber(tasks: Iterable[RunTask]) -> Tuple[RunTask, ...]:
    """Assign ``order`` 0..n-1 following iteration order."""
    return tuple(t if t.order == idx else replace(t, order=idx) for idx, t in enumerate(tasks))
