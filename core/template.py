from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class TemplateSubtask:
    id: str
    text: str
    order: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "text": self.text, "order": self.order}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TemplateSubtask":
        return cls(
            id=str(data.get("id", "") or ""),
            text=str(data.get("text", "") or ""),
            order=int(data.get("order", 0) or 0),
        )


@dataclass(frozen=True)
class TemplateTask:
    """A task as authored in a routine template.

    Visibility is expressed by three independent flags. ``low_safe`` and
    ``flow_extra`` are the legacy two-flag scheme; see
    :func:`migrate_task_visibility`.
    """

    id: str
    name: str
    duration_ms: int
    order: int
    low_included: Optional[bool] = None
    steady_included: Optional[bool] = None
    flow_included: Optional[bool] = None
    low_safe: Optional[bool] = None
    flow_extra: Optional[bool] = None
    auto_advance: bool = False
    subtasks: Optional[Tuple[TemplateSubtask, ...]] = None

    @property
    def has_visibility_flags(self) -> bool:
        return any(flag is not None for flag in (self.low_included, self.steady_included, self.flow_included))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "durationMs": self.duration_ms,
            "order": self.order,
            "autoAdvance": self.auto_advance,
        }
        for key, value in (
            ("lowIncluded", self.low_included),
            ("steadyIncluded", self.steady_included),
            ("flowIncluded", self.flow_included),
            ("lowSafe", self.low_safe),
            ("flowExtra", self.flow_extra),
        ):
            if value is not None:
                data[key] = value
        if self.subtasks is not None:
            data["subtasks"] = [st.to_dict() for st in self.subtasks]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TemplateTask":
        def _flag(key: str) -> Optional[bool]:
            value = data.get(key)
            return None if value is None else bool(value)

        raw_subtasks = data.get("subtasks")
        subtasks = None
        if isinstance(raw_subtasks, list):
            subtasks = tuple(TemplateSubtask.from_dict(st) for st in raw_subtasks if isinstance(st, dict))
        return cls(
            id=str(data.get("id", "") or ""),
            name=str(data.get("name", "") or ""),
            duration_ms=int(data.get("durationMs", 0) or 0),
            order=int(data.get("order", 0) or 0),
            low_included=_flag("lowIncluded"),
            steady_included=_flag("steadyIncluded"),
            flow_included=_flag("flowIncluded"),
            low_safe=_flag("lowSafe"),
            flow_extra=_flag("flowExtra"),
            auto_advance=bool(data.get("autoAdvance", False)),
            subtasks=subtasks,
        )


@dataclass(frozen=True)
class Template:
    id: str
    name: str
    tasks: Tuple[TemplateTask, ...] = field(default_factory=tuple)
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "tasks": [t.to_dict() for t in self.tasks],
        }
        if self.description is not None:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], *, migrate: bool = True) -> "Template":
        tasks = tuple(TemplateTask.from_dict(t) for t in (data.get("tasks") or []) if isinstance(t, dict))
        template = cls(
            id=str(data.get("id", "") or ""),
            name=str(data.get("name", "") or ""),
            tasks=tasks,
            description=data.get("description"),
        )
        return migrate_template(template) if migrate else template


def migrate_task_visibility(task: TemplateTask) -> TemplateTask:
    """Upgrade a task to the three-flag visibility scheme.

    Tasks that already carry any of the new flags keep them (missing ones
    become False). Legacy mapping:

    - lowSafe (with or without flowExtra): every pace
    - flowExtra alone: flow only
    - neither: steady only
    """
    if task.has_visibility_flags:
        low = bool(task.low_included)
        steady = bool(task.steady_included)
        flow = bool(task.flow_included)
    elif task.low_safe:
        low, steady, flow = True, True, True
    elif task.flow_extra:
        low, steady, flow = False, False, True
    else:
        low, steady, flow = False, True, False
    return replace(
        task,
        low_included=low,
        steady_included=steady,
        flow_included=flow,
        low_safe=None,
        flow_extra=None,
    )


def migrate_template(template: Template) -> Template:
    return replace(template, tasks=tuple(migrate_task_visibility(t) for t in template.tasks))
