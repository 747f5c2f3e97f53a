"""
Task Registry
-------------

Centralized tracking of asyncio tasks created by the effects engine.
Every effect run owns exactly one scheduling task; registering it here
gives introspection (what is running, what failed) and a single place to
find leftover tasks at shutdown.

Features:
- Register tasks with metadata (category, description, owner)
- Track creation time, completion state, cancellation, errors
- Introspection API for debugging
- Pruning of finished records so long-lived processes don't accumulate them
"""

from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TASK)


class TaskCategory(Enum):
    """Logical grouping of asynchronous tasks."""
    EFFECT = auto()
    SYSTEM = auto()
    GENERAL = auto()


@dataclass(frozen=True)
class TaskInfo:
    """Immutable metadata captured at task creation time."""
    id: int
    category: TaskCategory
    description: str
    created_at: str  # ISO UTC string
    created_by: Optional[str] = None


@dataclass
class TaskRecord:
    """Internal structure tracking task state."""
    task: asyncio.Task
    info: TaskInfo
    cancelled: bool = False
    finished_with_error: Optional[BaseException] = None
    finished_return: Optional[Any] = None
    finished_at: Optional[str] = None

    @property
    def done(self) -> bool:
        return self.task.done()


class TaskRegistry:
    """
    Global registry for the engine's asyncio tasks.

    Responsibilities:
    - Track tasks and metadata
    - Detect and log task failures
    - Provide debugging API
    - Expose still-running tasks for shutdown
    """

    _instance: Optional["TaskRegistry"] = None

    def __init__(self) -> None:
        self._records: Dict[int, TaskRecord] = {}
        self._ids = itertools.count(1)

    @classmethod
    def instance(cls) -> "TaskRegistry":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    # -----------------------------
    # Register new task
    # -----------------------------
    def register(
        self,
        task: asyncio.Task,
        category: TaskCategory,
        description: str,
        created_by: Optional[str] = None
    ) -> int:
        """Register a task with metadata and watch for its completion."""
        task_id = next(self._ids)
        info = TaskInfo(
            id=task_id,
            category=category,
            description=description,
            created_at=datetime.now(timezone.utc).isoformat(),
            created_by=created_by,
        )
        self._records[task_id] = TaskRecord(task=task, info=info)

        log.debug(f"[Task {task_id}] Registered ({category.name}) - {description}")

        task.add_done_callback(self._on_task_done)
        return task_id

    def _on_task_done(self, task: asyncio.Task) -> None:
        record = self._get_record_by_task(task)
        if record is None:
            return

        record.finished_at = datetime.now(timezone.utc).isoformat()
        if task.cancelled():
            record.cancelled = True
            log.debug(f"[Task {record.info.id}] Cancelled")
            return

        exc = task.exception()
        if exc:
            record.finished_with_error = exc
            log.error(f"[Task {record.info.id}] FAILED", description=record.info.description, exc=exc)
        else:
            record.finished_return = task.result()
            log.debug(f"[Task {record.info.id}] Completed successfully")

    def _get_record_by_task(self, task: asyncio.Task) -> Optional[TaskRecord]:
        for record in self._records.values():
            if record.task is task:
                return record
        return None

    # -----------------------------
    # Public API
    # -----------------------------

    def get(self, task_id: int) -> Optional[TaskRecord]:
        return self._records.get(task_id)

    def list_all(self) -> List[TaskRecord]:
        return list(self._records.values())

    def active(self, category: Optional[TaskCategory] = None) -> List[TaskRecord]:
        """Return tasks that are still running, optionally for one category."""
        return [
            r for r in self._records.values()
            if not r.task.done() and (category is None or r.info.category == category)
        ]

    def failed(self) -> List[TaskRecord]:
        return [r for r in self._records.values() if r.finished_with_error is not None]

    def cancelled(self) -> List[TaskRecord]:
        return [r for r in self._records.values() if r.cancelled]

    def summary(self) -> str:
        """Return human-readable summary for logs."""
        return (
            f"Tasks: total={len(self._records)}, running={len(self.active())}, "
            f"failed={len(self.failed())}, cancelled={len(self.cancelled())}"
        )

    def prune_finished(self) -> int:
        """Drop records of finished tasks. Returns how many were removed."""
        finished = [task_id for task_id, r in self._records.items() if r.task.done()]
        for task_id in finished:
            del self._records[task_id]
        if finished:
            log.debug(f"Pruned {len(finished)} finished task records")
        return len(finished)

    def get_tasks_for_shutdown(
        self,
        exclude: Optional[List[asyncio.Task]] = None
    ) -> List[asyncio.Task]:
        """Return all tasks that should be cancelled during shutdown."""
        exclude = exclude or []
        return [
            r.task for r in self._records.values()
            if not r.task.done() and r.task not in exclude
        ]


def create_tracked_task(
    coro,
    *,
    category: TaskCategory,
    description: str,
    created_by: Optional[str] = None,
    loop: Optional[asyncio.AbstractEventLoop] = None
) -> asyncio.Task:
    """Create and register a task in a single call."""
    loop = loop or asyncio.get_running_loop()
    task = loop.create_task(coro, name=description)

    TaskRegistry.instance().register(
        task=task,
        category=category,
        description=description,
        created_by=created_by,
    )
    return task
