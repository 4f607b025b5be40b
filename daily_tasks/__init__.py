"""Local task list: a TaskStore core with a FastAPI front."""

from daily_tasks.errors import StorageError, TaskImportError, TaskNotFoundError, TaskStoreError
from daily_tasks.models import Priority, Task, TaskFilter, TaskStats
from daily_tasks.storage import JsonFileStorage, KeyValueStorage, MemoryStorage
from daily_tasks.store import TaskStore

__all__ = [
    "JsonFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "Priority",
    "StorageError",
    "Task",
    "TaskFilter",
    "TaskImportError",
    "TaskNotFoundError",
    "TaskStats",
    "TaskStore",
    "TaskStoreError",
]
