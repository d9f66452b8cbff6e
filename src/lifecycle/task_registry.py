"""
Task Registry
-------------

Tracks the long-lived asyncio tasks of the process (API server, event
publishing, shutdown waiters) so they can be listed over the API and
cancelled in order during shutdown.

Short one-shot timers (fades, blinks, gesture timers, frame advances) are
not tasks; they live in the scheduler.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Optional, List, Any
from datetime import datetime, timezone

from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TASK)


class TaskCategory(Enum):
    """Logical grouping of asynchronous tasks."""
    API = auto()
    HARDWARE = auto()
    EVENTBUS = auto()
    SYSTEM = auto()
    BACKGROUND = auto()


@dataclass(frozen=True)
class TaskInfo:
    """Metadata captured when the task is registered"""
    id: int
    category: TaskCategory
    description: str
    created_at: str
    created_timestamp: float


@dataclass
class TaskRecord:
    task: asyncio.Task
    info: TaskInfo
    cancelled: bool = False
    finished_with_error: Optional[BaseException] = None
    finished_return: Optional[Any] = None

    @property
    def status(self) -> str:
        if not self.task.done():
            return "running"
        if self.cancelled:
            return "cancelled"
        if self.finished_with_error is not None:
            return "failed"
        return "completed"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.info.id,
            "category": self.info.category.name,
            "description": self.info.description,
            "created_at": self.info.created_at,
            "status": self.status,
            "error": str(self.finished_with_error) if self.finished_with_error else None,
        }


class TaskRegistry:
    """Process-wide registry of tracked tasks (singleton)"""

    _instance: Optional["TaskRegistry"] = None

    def __init__(self) -> None:
        self._records: Dict[int, TaskRecord] = {}
        self._next_id: int = 1

    @classmethod
    def instance(cls) -> "TaskRegistry":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Forget every record (tests)"""
        cls._instance = None

    def register(self, task: asyncio.Task, category: TaskCategory, description: str) -> int:
        task_id = self._next_id
        self._next_id += 1

        now = datetime.now(timezone.utc)
        info = TaskInfo(
            id=task_id,
            category=category,
            description=description,
            created_at=now.isoformat(),
            created_timestamp=now.timestamp(),
        )
        self._records[task_id] = TaskRecord(task=task, info=info)
        log.debug(f"[Task {task_id}] Registered ({category.name}) - {description}")

        task.add_done_callback(self._on_task_done)
        return task_id

    def _on_task_done(self, task: asyncio.Task) -> None:
        record = next((r for r in self._records.values() if r.task is task), None)
        if record is None:
            return

        if task.cancelled():
            record.cancelled = True
            log.debug(f"[Task {record.info.id}] Cancelled")
            return

        exc = task.exception()
        if exc:
            record.finished_with_error = exc
            log.error(f"[Task {record.info.id}] FAILED: {type(exc).__name__}: {exc}", description=record.info.description)
        else:
            record.finished_return = task.result()
            log.debug(f"[Task {record.info.id}] Completed")

    def list_all(self) -> List[TaskRecord]:
        return list(self._records.values())

    def active(self) -> List[TaskRecord]:
        return [r for r in self._records.values() if not r.task.done()]

    def failed(self) -> List[TaskRecord]:
        return [r for r in self._records.values() if r.finished_with_error is not None]

    def cancelled(self) -> List[TaskRecord]:
        return [r for r in self._records.values() if r.cancelled]

    def summary(self) -> str:
        return (
            f"Tasks: total={len(self._records)}, running={len(self.active())}, "
            f"failed={len(self.failed())}, cancelled={len(self.cancelled())}"
        )

    def get_tasks_for_shutdown(self, exclude: Optional[List[asyncio.Task]] = None) -> List[asyncio.Task]:
        """Running tracked tasks, minus the excluded ones"""
        exclude = exclude or []
        return [r.task for r in self._records.values() if not r.task.done() and r.task not in exclude]


def create_tracked_task(coro, *, category: TaskCategory, description: str) -> asyncio.Task:
    """Create a task on the running loop and register it in a single call"""
    task = asyncio.get_running_loop().create_task(coro)
    TaskRegistry.instance().register(task=task, category=category, description=description)
    return task
