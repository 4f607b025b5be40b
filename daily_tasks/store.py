"""Task list storage.

TaskStore owns the ordered task collection (newest first) and writes it to a
key-value slot after every mutation. Mutations build the new collection,
persist it, and only then swap it in, so a failed write leaves the in-memory
list as it was.
"""

import logging
import threading
from collections.abc import Callable, Iterable
from datetime import UTC, datetime

from pydantic import TypeAdapter, ValidationError

from daily_tasks.errors import StorageError, TaskImportError, TaskNotFoundError
from daily_tasks.models import Priority, Task, TaskFilter, TaskStats
from daily_tasks.storage import KeyValueStorage

logger = logging.getLogger(__name__)

DEFAULT_KEY = "tasks"
EXPORT_FILENAME = "tasks.json"

_TASK_LIST = TypeAdapter(list[Task])


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TaskStore:
    """Single authority over the task collection."""

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        key: str = DEFAULT_KEY,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Load the collection from `storage`, or start empty."""
        self._storage = storage
        self._key = key
        self._clock = clock
        self._tasks: list[Task] = []
        self._next_id = 1
        # Serializes read-modify-write cycles when callers run in a threadpool.
        self._lock = threading.RLock()
        self._restore()

    def _restore(self) -> None:
        raw = self._storage.get(self._key)
        if raw is None:
            logger.info("TaskStore ready key=%s total=0 (empty slot)", self._key)
            return
        try:
            tasks = self._parse(raw)
        except TaskImportError as exc:
            # The slot is left as-is until the next mutation overwrites it.
            logger.warning("Ignoring unreadable task slot key=%s: %s", self._key, exc)
            return
        self._commit(tasks)
        logger.info("TaskStore ready key=%s total=%s", self._key, len(self._tasks))

    # ---- internal helpers ----

    @staticmethod
    def _parse(raw: str | bytes) -> list[Task]:
        try:
            tasks = _TASK_LIST.validate_json(raw)
        except ValidationError as exc:
            raise TaskImportError(f"invalid task list: {exc.error_count()} error(s)") from exc
        seen: set[int] = set()
        for task in tasks:
            if task.id in seen:
                raise TaskImportError(f"duplicate task id {task.id}")
            seen.add(task.id)
        return tasks

    def _commit(self, tasks: list[Task]) -> None:
        self._tasks = tasks
        # Ids only grow, so a deleted task's id is never handed out again.
        self._next_id = max(self._next_id, max((t.id for t in tasks), default=0) + 1)

    def _save(self, tasks: list[Task]) -> None:
        """Persist `tasks` and make them the current collection."""
        self.persist(tasks)
        self._commit(tasks)

    @staticmethod
    def _dump(tasks: list[Task], indent: int | None = None) -> str:
        return _TASK_LIST.dump_json(tasks, by_alias=True, indent=indent).decode("utf-8")

    def _index_of(self, task_id: int) -> int:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        raise TaskNotFoundError(task_id)

    # ---- queries ----

    def __len__(self) -> int:
        return len(self._tasks)

    def list_all(self) -> tuple[Task, ...]:
        """Return all tasks, newest first."""
        return tuple(self._tasks)

    def get(self, task_id: int) -> Task:
        """Get a task by its ID. Raises TaskNotFoundError if absent."""
        return self._tasks[self._index_of(task_id)]

    def filtered_view(self, task_filter: TaskFilter | str = TaskFilter.ALL) -> tuple[Task, ...]:
        """Return the tasks matching a named filter, in collection order."""
        task_filter = TaskFilter(task_filter)
        if task_filter is TaskFilter.PENDING:
            return tuple(t for t in self._tasks if not t.completed)
        if task_filter is TaskFilter.COMPLETED:
            return tuple(t for t in self._tasks if t.completed)
        if task_filter is TaskFilter.HIGH_PRIORITY:
            return tuple(t for t in self._tasks if t.priority is Priority.HIGH)
        return tuple(self._tasks)

    def stats(self) -> TaskStats:
        """Return total/completed/pending counters."""
        total = len(self._tasks)
        completed = sum(1 for t in self._tasks if t.completed)
        return TaskStats(total=total, completed=completed, pending=total - completed)

    # ---- mutations ----

    def add(self, text: str, priority: Priority | str | None = None) -> Task | None:
        """Create a task at the top of the list. Blank text is ignored."""
        text = (text or "").strip()
        if not text:
            return None

        with self._lock:
            task = Task(
                id=self._next_id,
                text=text,
                priority=Priority.coerce(priority),
                completed=False,
                created_at=self._clock(),
                completed_at=None,
            )
            self._save([task, *self._tasks])
        logger.debug("Task added id=%s priority=%s", task.id, task.priority)
        return task

    def edit(
        self, task_id: int, text: str, priority: Priority | str | None = None
    ) -> Task | None:
        """Replace a task's text and priority. Blank text is ignored.

        Omitting `priority` keeps the current one.
        """
        text = (text or "").strip()
        if not text:
            return None

        with self._lock:
            index = self._index_of(task_id)
            current = self._tasks[index]
            updated = current.model_copy(
                update={
                    "text": text,
                    "priority": current.priority if priority is None else Priority.coerce(priority),
                }
            )
            tasks = list(self._tasks)
            tasks[index] = updated
            self._save(tasks)
        logger.debug("Task edited id=%s", task_id)
        return updated

    def toggle_complete(self, task_id: int) -> Task:
        """Flip a task between pending and completed."""
        with self._lock:
            index = self._index_of(task_id)
            current = self._tasks[index]
            completed = not current.completed
            updated = current.model_copy(
                update={
                    "completed": completed,
                    "completed_at": self._clock() if completed else None,
                }
            )
            tasks = list(self._tasks)
            tasks[index] = updated
            self._save(tasks)
        logger.debug("Task toggled id=%s completed=%s", task_id, completed)
        return updated

    def delete(self, task_id: int) -> bool:
        """Delete a task. Returns True if deleted, False if not found."""
        with self._lock:
            tasks = [t for t in self._tasks if t.id != task_id]
            if len(tasks) == len(self._tasks):
                return False
            self._save(tasks)
        logger.debug("Task deleted id=%s", task_id)
        return True

    def clear_completed(self) -> int:
        """Remove every completed task and return how many were removed."""
        with self._lock:
            tasks = [t for t in self._tasks if not t.completed]
            removed = len(self._tasks) - len(tasks)
            self._save(tasks)
        logger.debug("Cleared completed tasks removed=%s", removed)
        return removed

    # ---- import / export ----

    def serialize(self, indent: int | None = None) -> str:
        """Encode the whole collection as a JSON array."""
        return self._dump(self._tasks, indent=indent)

    def export_json(self) -> str:
        """Pretty-printed serialization for the downloadable tasks.json."""
        return self.serialize(indent=2)

    def load(self, raw: str | bytes) -> int:
        """Replace the collection with an imported JSON array.

        Every record is validated and ids must be unique. On any failure
        TaskImportError is raised and nothing changes.
        """
        if not isinstance(raw, (str, bytes)):
            raise TaskImportError("import payload must be text")
        try:
            tasks = self._parse(raw)
        except TaskImportError:
            logger.warning("Rejected task import", exc_info=True)
            raise
        with self._lock:
            self._save(tasks)
        logger.info("Imported tasks total=%s", len(tasks))
        return len(tasks)

    def persist(self, tasks: Iterable[Task] | None = None) -> None:
        """Write `tasks` (default: the current collection) to the storage slot.

        Every mutation calls this with its new collection before swapping it in.
        """
        with self._lock:
            payload = self._dump(list(self._tasks if tasks is None else tasks))
            try:
                self._storage.set(self._key, payload)
            except StorageError:
                logger.warning("Persisting tasks failed key=%s", self._key, exc_info=True)
                raise
