"""Side-effect requests produced by run transitions.

The engine never speaks or notifies by itself. Transitions that should be
announced return :class:`Effect` values next to the new snapshot; the
application layer commits the snapshot first and dispatches the effects
afterwards. Effects are plain data so they can be asserted in tests and
serialized for the CLI.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, NamedTuple, Optional, Tuple

from .run import Run

# Effect kinds
EFFECT_TASK_TRANSITION = "task_transition"  # active task completed, next started
EFFECT_TASK_SKIPPED = "task_skipped"  # active task skipped, next started
EFFECT_ROUTINE_COMPLETE = "routine_complete"  # no pending task left
EFFECT_OVERTIME_REMINDER = "overtime_reminder"
EFFECT_TIME_MILESTONE = "time_milestone"
EFFECT_TIME_UP = "time_up"
EFFECT_AUTO_ADVANCE_WARNING = "auto_advance_warning"

TRANSITION_KINDS = frozenset({EFFECT_TASK_TRANSITION, EFFECT_TASK_SKIPPED, EFFECT_ROUTINE_COMPLETE})


@dataclass(frozen=True)
class Effect:
    """A single announcement request.

    Attributes:
        kind: one of the ``EFFECT_*`` constants
        task_id: task the effect is about ("" for run-level effects)
        data: kind-specific payload (task names, minutes, ...)
    """

    kind: str
    task_id: str = ""
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def task_transition(cls, finished: str, next_task: str, task_id: str = "") -> "Effect":
        return cls(EFFECT_TASK_TRANSITION, task_id, {"completed": finished, "next": next_task})

    @classmethod
    def task_skipped(cls, skipped: str, next_task: str, task_id: str = "") -> "Effect":
        return cls(EFFECT_TASK_SKIPPED, task_id, {"skipped": skipped, "next": next_task})

    @classmethod
    def routine_complete(cls, routine_name: str, single_item: bool = False) -> "Effect":
        return cls(EFFECT_ROUTINE_COMPLETE, "", {"routine": routine_name, "single_item": single_item})

    @classmethod
    def overtime_reminder(cls, task_id: str, task_name: str, minutes: int) -> "Effect":
        return cls(EFFECT_OVERTIME_REMINDER, task_id, {"task": task_name, "minutes": minutes})

    @classmethod
    def time_milestone(cls, task_id: str, task_name: str, minutes: int) -> "Effect":
        return cls(EFFECT_TIME_MILESTONE, task_id, {"task": task_name, "minutes": minutes})

    @classmethod
    def time_up(cls, task_id: str, task_name: str) -> "Effect":
        return cls(EFFECT_TIME_UP, task_id, {"task": task_name})

    @classmethod
    def auto_advance_warning(cls, task_id: str, task_name: str, next_task: str) -> "Effect":
        return cls(EFFECT_AUTO_ADVANCE_WARNING, task_id, {"task": task_name, "next": next_task})

    @property
    def is_transition(self) -> bool:
        return self.kind in TRANSITION_KINDS

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "task_id": self.task_id, "data": dict(self.data)}


class Transition(NamedTuple):
    """New run snapshot plus the effects to dispatch once it is committed."""

    run: Run
    effects: Tuple[Effect, ...] = ()

    def first(self, kind: str) -> Optional[Effect]:
        for effect in self.effects:
            if effect.kind == kind:
                return effect
        return None
