# mtengine/infrastructure/concurrency/task_executor.py

import logging
from enum import Enum, auto
from typing import Callable, List, TypeVar

from mtengine.infrastructure.concurrency.process_pool import ProcessPool
from mtengine.infrastructure.concurrency.thread_pool import ThreadPool

T = TypeVar("T")

class ExecutionMode(Enum):
    SEQUENTIAL = auto()
    MULTITHREAD = auto()
    MULTIPROCESS = auto()

    @classmethod
    def from_name(cls, name: str) -> "ExecutionMode":
        """Parse a config value such as 'multithread' (case-insensitive)."""
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown execution mode: {name}") from None

class TaskExecutor:
    def __init__(self, mode: ExecutionMode = ExecutionMode.SEQUENTIAL, max_workers: int = None):
        self.mode = mode
        self.max_workers = max_workers
        self.logger = logging.getLogger("infrastructure.task_executor")
        self.pool = self._create_pool()

    def _create_pool(self):
        if self.mode == ExecutionMode.MULTITHREAD:
            return ThreadPool(self.max_workers)
        elif self.mode == ExecutionMode.MULTIPROCESS:
            return ProcessPool(self.max_workers)
        return None

    def execute(self, tasks: List[Callable[[], T]]) -> List[T]:
        task_count = len(tasks)
        self.logger.info(f"Executing {task_count} tasks in {self.mode.name} mode")

        if self.mode == ExecutionMode.SEQUENTIAL:
            return [task() for task in tasks]
        else:
            return self.pool.execute_tasks(tasks)
