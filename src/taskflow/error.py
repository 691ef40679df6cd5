# SPDX-License-Identifier: MIT


class TaskFlowError(Exception):
    """Base class for errors surfaced to the user."""

    pass


class ConfigurationError(TaskFlowError):
    """Raised when the configuration cannot produce a working backend."""

    pass


class TaskValidationError(TaskFlowError):
    """Raised when a task draft or change set violates a task invariant."""

    pass


class BackendError(TaskFlowError):
    """Raised when the backend rejects or fails a request."""

    pass


class TaskNotFoundError(BackendError):
    """Raised when no task with the id exists for the requesting user."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class StaleWriteError(BackendError):
    """Raised when a write is based on an outdated version of a task."""

    def __init__(self, task_id: str) -> None:
        super().__init__(
            f"Task {task_id} was changed elsewhere. Reload and try again."
        )
        self.task_id = task_id


class AuthError(BackendError):
    """Raised when the auth provider refuses a request."""

    pass


class TimelineCapacityError(TaskFlowError):
    """Raised when the timeline needs more packing rows than allowed."""

    def __init__(self, max_rows: int) -> None:
        super().__init__(
            f"Timeline needs more than {max_rows} rows; raise timeline_max_rows "
            "or narrow the task filter"
        )
        self.max_rows = max_rows
