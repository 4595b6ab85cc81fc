import json
from pathlib import Path
from typing import Any, Dict

import yaml

from core import Template, TemplateError
from core.duration import duration_to_ms, minutes_to_ms


class TemplateFileParser:
    """Reads routine templates authored as YAML or JSON.

    Besides the canonical ``durationMs`` a task may give its length as a
    ``duration`` string (``"~25 min"``) or as ``minutes``.
    """

    JSON_SUFFIXES = {".json"}

    @staticmethod
    def _read(path: Path) -> Any:
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() in TemplateFileParser.JSON_SUFFIXES:
            return json.loads(text)
        return yaml.safe_load(text)

    @staticmethod
    def _normalize_task(raw: Dict[str, Any], index: int) -> Dict[str, Any]:
        task = dict(raw)
        if task.get("durationMs") is None:
            if task.get("minutes") is not None:
                task["durationMs"] = minutes_to_ms(task["minutes"])
            else:
                task["durationMs"] = duration_to_ms(task.get("duration"))
        task.setdefault("order", index)
        task.setdefault("id", f"task-{index + 1}")
        if isinstance(task.get("subtasks"), list):
            task["subtasks"] = [
                {"id": f"{task['id']}-st-{pos + 1}", "text": st, "order": pos} if isinstance(st, str) else st
                for pos, st in enumerate(task["subtasks"])
            ]
        return task

    @classmethod
    def parse_data(cls, data: Any, *, source: str = "<data>") -> Template:
        if not isinstance(data, dict):
            raise TemplateError(f"{source}: template must be a mapping")
        tasks = data.get("tasks")
        if not isinstance(tasks, list) or not tasks:
            raise TemplateError(f"{source}: template needs a non-empty 'tasks' list")
        body = dict(data)
        body["tasks"] = []
        for index, raw in enumerate(tasks):
            if not isinstance(raw, dict) or not str(raw.get("name") or "").strip():
                raise TemplateError(f"{source}: task #{index + 1} needs a name")
            body["tasks"].append(cls._normalize_task(raw, index))
        body.setdefault("id", Path(source).stem if source != "<data>" else "template")
        body.setdefault("name", body["id"])
        try:
            return Template.from_dict(body, migrate=True)
        except (TypeError, ValueError) as exc:
            raise TemplateError(f"{source}: {exc}") from exc

    @classmethod
    def load(cls, path: Path) -> Template:
        path = Path(path)
        if not path.exists():
            raise TemplateError(f"Template not found: {path}")
        try:
            data = cls._read(path)
        except (OSError, json.JSONDecodeError, yaml.YAMLError) as exc:
            raise TemplateError(f"Cannot read template {path}: {exc}") from exc
        return cls.parse_data(data, source=str(path))


__all__ = ["TemplateFileParser"]
