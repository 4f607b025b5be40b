"""FastAPI application exposing the task store to a browser front-end."""

import logging
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response, status
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from daily_tasks.config import Settings, get_settings
from daily_tasks.errors import StorageError, TaskImportError, TaskNotFoundError
from daily_tasks.models import (
    ClearResult,
    HealthResponse,
    ImportResult,
    Task,
    TaskCreate,
    TaskFilter,
    TaskStats,
    TaskUpdate,
)
from daily_tasks.storage import JsonFileStorage
from daily_tasks.store import EXPORT_FILENAME, TaskStore

logger = logging.getLogger(__name__)


def get_store(request: Request) -> TaskStore:
    """Return the store bound to this application."""
    return request.app.state.store


StoreDep = Annotated[TaskStore, Depends(get_store)]


async def _not_found(request: Request, exc: TaskNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": "Task not found"})


async def _import_failed(request: Request, exc: TaskImportError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": f"Error importing tasks: {exc}"},
    )


async def _storage_failed(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_507_INSUFFICIENT_STORAGE,
        content={"detail": "Could not save tasks"},
    )


def create_app(store: TaskStore | None = None, settings: Settings | None = None) -> FastAPI:
    """Build the application around an explicit TaskStore.

    Without a store, one is created over a JsonFileStorage in the configured
    data directory.
    """
    settings = settings or get_settings()
    if store is None:
        store = TaskStore(JsonFileStorage(settings.data_dir), key=settings.storage_key)

    app = FastAPI(
        title="Daily Tasks",
        description="Local task list with priorities, filters and JSON import/export.",
        version="1.0.0",
    )
    app.state.store = store

    # Configure CORS for frontend access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TaskNotFoundError, _not_found)
    app.add_exception_handler(TaskImportError, _import_failed)
    app.add_exception_handler(StorageError, _storage_failed)

    @app.get("/api/health", response_model=HealthResponse, tags=["System"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse()

    @app.get("/api/tasks", response_model=list[Task], tags=["Tasks"])
    async def list_tasks(
        store: StoreDep,
        task_filter: Annotated[TaskFilter, Query(alias="filter")] = TaskFilter.ALL,
    ) -> list[Task]:
        """List tasks matching a filter, newest first."""
        return list(store.filtered_view(task_filter))

    @app.post(
        "/api/tasks",
        response_model=Task,
        status_code=status.HTTP_201_CREATED,
        tags=["Tasks"],
        responses={204: {"description": "Blank text, nothing created"}},
    )
    def create_task(data: TaskCreate, store: StoreDep) -> Task | Response:
        """Create a new task."""
        task = store.add(data.text, data.priority)
        if task is None:
            return Response(status_code=status.HTTP_204_NO_CONTENT)
        return task

    @app.delete("/api/tasks/completed", response_model=ClearResult, tags=["Tasks"])
    def clear_completed(store: StoreDep) -> ClearResult:
        """Delete every completed task."""
        return ClearResult(removed=store.clear_completed())

    @app.get("/api/tasks/{task_id}", response_model=Task, tags=["Tasks"])
    async def get_task(task_id: int, store: StoreDep) -> Task:
        """Get a specific task by ID."""
        return store.get(task_id)

    @app.patch(
        "/api/tasks/{task_id}",
        response_model=Task,
        tags=["Tasks"],
        responses={204: {"description": "Blank text, nothing changed"}},
    )
    def update_task(task_id: int, data: TaskUpdate, store: StoreDep) -> Task | Response:
        """Edit a task's text and priority."""
        task = store.edit(task_id, data.text, data.priority)
        if task is None:
            return Response(status_code=status.HTTP_204_NO_CONTENT)
        return task

    @app.post("/api/tasks/{task_id}/toggle", response_model=Task, tags=["Tasks"])
    def toggle_task(task_id: int, store: StoreDep) -> Task:
        """Mark a task completed, or back to pending."""
        return store.toggle_complete(task_id)

    @app.delete(
        "/api/tasks/{task_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        tags=["Tasks"],
    )
    def delete_task(task_id: int, store: StoreDep) -> None:
        """Delete a task."""
        if not store.delete(task_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Task not found",
            )

    @app.get("/api/stats", response_model=TaskStats, tags=["Tasks"])
    async def get_stats(store: StoreDep) -> TaskStats:
        """Total, completed and pending counters."""
        return store.stats()

    @app.get("/api/export", tags=["Import/Export"])
    async def export_tasks(store: StoreDep) -> Response:
        """Download all tasks as tasks.json."""
        return Response(
            content=store.export_json(),
            media_type="application/json",
            headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
        )

    @app.post("/api/import", response_model=ImportResult, tags=["Import/Export"])
    async def import_tasks(request: Request, store: StoreDep) -> ImportResult:
        """Replace all tasks with the JSON array in the request body."""
        raw = await request.body()
        return ImportResult(imported=await run_in_threadpool(store.load, raw))

    return app
