"""Error kinds raised by the routine run engine.

Every error is raised before a new snapshot is built, so the caller's run
is never left half-updated.
"""


class RunEngineError(Exception):
    """Base class for engine errors. ``code`` is a stable i18n key."""

    code = "ERR_RUN_ENGINE"

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidTransition(RunEngineError):
    code = "ERR_INVALID_TRANSITION"

    def __init__(self, action: str, status: str):
        super().__init__(f"Cannot {action} a run that is {status}", action=action, status=status)
        self.action = action
        self.status = status


class TaskNotFound(RunEngineError):
    code = "ERR_TASK_NOT_FOUND"

    def __init__(self, task_id: str):
        super().__init__(f"Task not found: {task_id}", task_id=task_id)
        self.task_id = task_id


class TaskNotMovable(RunEngineError):
    code = "ERR_TASK_NOT_MOVABLE"

    def __init__(self, task_id: str, status: str):
        super().__init__(f"Task {task_id} is {status} and cannot be moved", task_id=task_id, status=status)
        self.task_id = task_id
        self.status = status


class TemplateError(ValueError):
    """Raised when a template file cannot be read or has the wrong shape."""

    code = "ERR_TEMPLATE_INVALID"
