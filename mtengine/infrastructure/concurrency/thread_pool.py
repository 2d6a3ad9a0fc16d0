import concurrent.futures
import logging
from typing import Callable, List, TypeVar

T = TypeVar("T")

class ThreadPool:
    def __init__(self, max_workers: int = None):
        self.max_workers = max_workers
        self.logger = logging.getLogger("infrastructure.thread_pool")

    def execute_tasks(self, tasks: List[Callable[[], T]]) -> List[T]:
        """Run tasks on worker threads; results come back in completion order."""
        self.logger.info(f"Executing {len(tasks)} tasks with {self.max_workers} workers")
        results = []
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(task) for task in tasks]
            for future in concurrent.futures.as_completed(futures):
                results.append(future.result())
        return results
