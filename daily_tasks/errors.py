"""Errors raised by the task store and its storage backends."""


class TaskStoreError(Exception):
    """Base class for all task store failures."""


class TaskNotFoundError(TaskStoreError):
    """Raised when an operation references a task id that is not in the store."""

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class TaskImportError(TaskStoreError):
    """Raised when an import payload is rejected. Existing state is left untouched."""


class StorageError(TaskStoreError):
    """Raised when the persistence slot cannot be read or written."""
