# mtengine/application/analysis/seed_search.py
import functools
import logging
import time
from typing import Iterable, List, Optional

from mtengine.domain.engine.mersenne_twister import create_engine
from mtengine.domain.engine.params import MT19937_PARAMS, TwisterParams
from mtengine.infrastructure.concurrency.task_executor import TaskExecutor


def recover_seed_from_nth(output: int, nth: int, candidates: Iterable[int],
                          params: TwisterParams = MT19937_PARAMS) -> Optional[int]:
    """
    Find the first candidate seed whose nth output (zero-based) equals `output`.

    One engine is reseeded per candidate instead of constructing a new one.

    Returns:
        The matching seed or None
    """
    if nth < 0:
        raise ValueError(f"nth must be non-negative, got {nth}")

    engine = create_engine(params, 0)
    for candidate in candidates:
        engine.reseed(candidate)
        for _ in range(nth):
            engine.generate()
        if engine.generate() == output:
            return candidate
    return None


def _search_range(output: int, nth: int, start: int, stop: int, params: TwisterParams) -> Optional[int]:
    # Module level so process pools can pickle it
    return recover_seed_from_nth(output, nth, range(start, stop), params)


def password_reset_token(seed: int, params: TwisterParams = MT19937_PARAMS) -> str:
    """Six-digit token derived from the first output of a freshly seeded engine."""
    output = create_engine(params, seed).generate() % 999_999
    return f"{output:06d}"


def recover_seed_from_token(token: str, candidates: Iterable[int],
                            params: TwisterParams = MT19937_PARAMS) -> Optional[int]:
    """Find a seed producing the given password reset token."""
    for candidate in candidates:
        if password_reset_token(candidate, params) == token:
            return candidate
    return None


class SeedSearch:
    """
    Brute-force seed recovery over integer ranges.

    The range is split into chunks that run through a TaskExecutor; each
    chunk owns its own engine, so chunks are safe to run in parallel.
    """
    def __init__(self, task_executor: Optional[TaskExecutor] = None, chunk_size: int = 4096):
        """
        Initialize the search.

        Args:
            task_executor: Executor for the chunks (sequential when omitted)
            chunk_size: Number of seeds per task
        """
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.logger = logging.getLogger("application.analysis.seed_search")
        self.task_executor = task_executor or TaskExecutor()
        self.chunk_size = chunk_size

    def search(self, output: int, start: int, stop: int, nth: int = 0,
               params: TwisterParams = MT19937_PARAMS) -> Optional[int]:
        """
        Search seeds in [start, stop) for one whose nth output equals `output`.

        When several seeds match, the smallest one is returned.

        Args:
            output: Observed output word
            start: First seed to try
            stop: One past the last seed to try
            nth: Zero-based position of the observed output
            params: Coefficient set of the observed generator

        Returns:
            The matching seed or None
        """
        if stop <= start:
            return None

        tasks = [
            functools.partial(_search_range, output, nth, lo, min(lo + self.chunk_size, stop), params)
            for lo in range(start, stop, self.chunk_size)
        ]
        self.logger.info(
            f"Searching {stop - start} {params.name} seeds in {len(tasks)} chunks for output {output}"
        )

        started = time.time()
        hits: List[int] = [seed for seed in self.task_executor.execute(tasks) if seed is not None]
        elapsed = time.time() - started

        if not hits:
            self.logger.info(f"No seed found in [{start}, {stop}) after {elapsed:.2f}s")
            return None

        seed = min(hits)
        self.logger.info(f"Recovered seed {seed} in {elapsed:.2f}s")
        return seed

    def search_time_window(self, output: int, now: Optional[int] = None, window_seconds: int = 3600,
                           nth: int = 0, params: TwisterParams = MT19937_PARAMS) -> Optional[int]:
        """
        Recover a Unix-timestamp seed around `now`.

        Args:
            output: Observed output word
            now: Reference timestamp in seconds (current time when omitted)
            window_seconds: Seeds from now - window to now + window are tried
            nth: Zero-based position of the observed output
            params: Coefficient set of the observed generator
        """
        if now is None:
            now = int(time.time())
        start = max(0, now - window_seconds)
        return self.search(output, start, now + window_seconds + 1, nth, params)
