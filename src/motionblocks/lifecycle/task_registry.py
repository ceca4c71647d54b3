"""
Task Registry

Every asyncio task behind an editor timer (debounce, grace window,
deferred decompile) is created through create_tracked_task() and recorded
here with its category, description and owner. The registry is used for
diagnostics and for cancelling all timers of a session on teardown.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, auto
from itertools import count
from typing import Any, Coroutine, Dict, List, Optional

from motionblocks.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TASK)


class TaskCategory(Enum):
    """What a tracked task is for"""
    DEBOUNCE = auto()
    GRACE = auto()
    DECOMPILE = auto()
    GENERAL = auto()


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class TaskInfo:
    """Metadata fixed at creation time"""
    id: int
    category: TaskCategory
    description: str
    owner: Optional[str] = None
    created_at: str = field(default_factory=_utc_now)


@dataclass
class TaskRecord:
    """A tracked task and how it ended"""
    task: asyncio.Task
    info: TaskInfo
    cancelled: bool = False
    error: Optional[BaseException] = None
    result: Any = None
    finished_at: Optional[str] = None

    @property
    def running(self) -> bool:
        return not self.task.done()


class TaskRegistry:
    """
    Process-wide registry of timer tasks

    Finished records beyond `history_limit` are dropped oldest first, so a
    long editing session does not keep one record per keystroke.
    """

    _instance: Optional[TaskRegistry] = None

    def __init__(self, history_limit: int = 200) -> None:
        self._records: Dict[asyncio.Task, TaskRecord] = {}
        self._ids = count(1)
        self._history_limit = history_limit

    @classmethod
    def instance(cls) -> TaskRegistry:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Forget the shared instance (tests)"""
        cls._instance = None

    def register(
        self,
        task: asyncio.Task,
        category: TaskCategory,
        description: str,
        owner: Optional[str] = None,
    ) -> int:
        info = TaskInfo(id=next(self._ids), category=category, description=description, owner=owner)
        self._records[task] = TaskRecord(task=task, info=info)
        task.add_done_callback(self._on_task_done)

        log.debug(f"[Task {info.id}] {category.name}: {description}", owner=owner)
        self._prune()
        return info.id

    def _on_task_done(self, task: asyncio.Task) -> None:
        record = self._records.get(task)
        if record is None:
            return

        record.finished_at = _utc_now()
        if task.cancelled():
            record.cancelled = True
            log.debug(f"[Task {record.info.id}] Cancelled")
        elif task.exception() is not None:
            record.error = task.exception()
            log.error(f"[Task {record.info.id}] FAILED: {record.error}", description=record.info.description)
        else:
            record.result = task.result()

    def _prune(self) -> None:
        excess = len(self._records) - self._history_limit
        if excess <= 0:
            return
        finished = [task for task, record in self._records.items() if not record.running]
        for task in finished[:excess]:
            del self._records[task]

    # -----------------------------
    # Queries
    # -----------------------------

    def list_all(self) -> List[TaskRecord]:
        return list(self._records.values())

    def active(self, owner: Optional[str] = None) -> List[TaskRecord]:
        """Running tasks, optionally only those of one owner"""
        return [
            r for r in self._records.values()
            if r.running and (owner is None or r.info.owner == owner)
        ]

    def failed(self) -> List[TaskRecord]:
        return [r for r in self._records.values() if r.error is not None]

    def cancelled(self) -> List[TaskRecord]:
        return [r for r in self._records.values() if r.cancelled]

    def cancel_owner(self, owner: str) -> int:
        """Cancel every running task of owner; returns the count"""
        records = self.active(owner)
        for record in records:
            record.task.cancel()
        if records:
            log.debug(f"Cancelled {len(records)} task(s)", owner=owner)
        return len(records)

    def summary(self) -> str:
        return (
            f"Tasks: total={len(self._records)}, running={len(self.active())}, "
            f"failed={len(self.failed())}, cancelled={len(self.cancelled())}"
        )


def create_tracked_task(
    coro: Coroutine[Any, Any, Any],
    *,
    category: TaskCategory,
    description: str,
    owner: Optional[str] = None,
    loop: Optional[asyncio.AbstractEventLoop] = None,
) -> asyncio.Task:
    """Create a task on the running (or given) loop and register it"""
    loop = loop or asyncio.get_running_loop()
    task = loop.create_task(coro)
    TaskRegistry.instance().register(task, category=category, description=description, owner=owner)
    return task
