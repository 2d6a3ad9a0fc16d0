# mtengine/infrastructure/concurrency/process_pool.py

import concurrent.futures
import logging
import multiprocessing
from typing import Callable, List, Optional, TypeVar

T = TypeVar('T')  # Return type of tasks

class ProcessPool:
    """
    Pool of worker processes for CPU-bound work such as seed searches.

    Tasks must be picklable: module-level functions or functools.partial
    objects over them, never lambdas.
    """
    def __init__(self, max_workers: Optional[int] = None):
        """
        Initialize the process pool.

        Args:
            max_workers: Maximum number of worker processes (defaults to CPU count - 1)
        """
        self.logger = logging.getLogger("infrastructure.process_pool")
        cpu_count = multiprocessing.cpu_count()
        self.max_workers = max_workers or max(1, cpu_count - 1)
        self.logger.info(f"Initialized process pool with {self.max_workers} workers")

    def execute_tasks(self, tasks: List[Callable[[], T]]) -> List[T]:
        """
        Execute tasks across multiple processes.

        Args:
            tasks: List of picklable callables

        Returns:
            List of results in completion order
        """
        self.logger.info(f"Executing {len(tasks)} tasks with {self.max_workers} processes")

        results = []
        with concurrent.futures.ProcessPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(task) for task in tasks]
            for future in concurrent.futures.as_completed(futures):
                try:
                    results.append(future.result())
                except Exception as e:
                    self.logger.error(f"Task failed: {str(e)}")
                    raise

        self.logger.info(f"All {len(tasks)} process tasks completed")
        return results
