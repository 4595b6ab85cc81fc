from enum import Enum
from typing import Final, FrozenSet


class RunStatus(str, Enum):
    NOT_STARTED = "notStarted"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    ABANDONED = "abandoned"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_RUN_STATUSES

    @classmethod
    def from_string(cls, value: str) -> "RunStatus":
        return cls(normalize_run_status(value))


class TaskStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    SKIPPED = "skipped"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_TASK_STATUSES

    @classmethod
    def from_string(cls, value: str) -> "TaskStatus":
        return cls(normalize_task_status(value))


class Pace(str, Enum):
    LOW = "low"
    STEADY = "steady"
    FLOW = "flow"

    @classmethod
    def from_string(cls, value: str) -> "Pace":
        token = (value or "").strip().lower()
        if not token:
            return cls.STEADY
        try:
            return cls(token)
        except ValueError:
            raise ValueError(f"Invalid pace: {value!r}") from None


TERMINAL_RUN_STATUSES: Final[FrozenSet[RunStatus]] = frozenset({RunStatus.COMPLETED, RunStatus.ABANDONED})
TERMINAL_TASK_STATUSES: Final[FrozenSet[TaskStatus]] = frozenset({TaskStatus.COMPLETED, TaskStatus.SKIPPED})

# snake/upper spellings seen in hand-written state files
_RUN_ALIASES: Final[dict] = {
    "not_started": "notStarted",
    "notstarted": "notStarted",
}


def normalize_run_status(value: str) -> str:
    """Normalize run status input to its canonical camelCase code.

    Accepts any case and the snake_case spelling of ``notStarted``.
    """
    token = (value or "").strip()
    lowered = token.lower()
    if lowered in _RUN_ALIASES:
        return _RUN_ALIASES[lowered]
    for status in RunStatus:
        if status.value.lower() == lowered:
            return status.value
    raise ValueError(f"Invalid run status: {value!r}")


def normalize_task_status(value: str) -> str:
    token = (value or "").strip().lower()
    for status in TaskStatus:
        if status.value == token:
            return status.value
    raise ValueError(f"Invalid task status: {value!r}")
