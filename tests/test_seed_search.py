# tests/test_seed_search.py
import os
import sys
import unittest

# Add repository root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from mtengine.application.analysis.seed_search import (
    SeedSearch,
    password_reset_token,
    recover_seed_from_nth,
    recover_seed_from_token,
)
from mtengine.domain.engine.mersenne_twister import MT19937, MT19937_64
from mtengine.domain.engine.params import MT19937_64_PARAMS
from mtengine.infrastructure.concurrency.task_executor import ExecutionMode, TaskExecutor


def nth_output(engine, nth):
    """Zero-based nth output."""
    for _ in range(nth):
        engine.generate()
    return engine.generate()


class TestRecoverSeed(unittest.TestCase):

    def test_first_output(self):
        output = MT19937(150).generate()
        self.assertEqual(recover_seed_from_nth(output, 0, range(100, 200)), 150)

    def test_nth_output_64(self):
        output = nth_output(MT19937_64(61), 5)
        self.assertEqual(recover_seed_from_nth(output, 5, range(0, 100), MT19937_64_PARAMS), 61)

    def test_not_found(self):
        output = MT19937(500).generate()
        self.assertIsNone(recover_seed_from_nth(output, 0, range(0, 50)))

    def test_negative_nth(self):
        with self.assertRaises(ValueError):
            recover_seed_from_nth(1, -1, range(3))


class TestPasswordResetToken(unittest.TestCase):

    def test_token_format(self):
        token = password_reset_token(5489)
        self.assertEqual(len(token), 6)
        self.assertEqual(token, f"{3499211612 % 999_999:06d}")

    def test_recover_from_token(self):
        token = password_reset_token(555)
        self.assertEqual(recover_seed_from_token(token, range(500, 600)), 555)

    def test_recover_from_token_64(self):
        token = password_reset_token(42, MT19937_64_PARAMS)
        self.assertEqual(recover_seed_from_token(token, range(0, 100), MT19937_64_PARAMS), 42)


class TestSeedSearch(unittest.TestCase):
    """Chunked search through every execution mode."""

    def _check_mode(self, mode):
        executor = TaskExecutor(mode, max_workers=2)
        search = SeedSearch(executor, chunk_size=50)
        output = nth_output(MT19937(1234), 3)
        self.assertEqual(search.search(output, 1000, 1300, nth=3), 1234)

    def test_sequential(self):
        self._check_mode(ExecutionMode.SEQUENTIAL)

    def test_multithread(self):
        self._check_mode(ExecutionMode.MULTITHREAD)

    def test_multiprocess(self):
        self._check_mode(ExecutionMode.MULTIPROCESS)

    def test_not_found_and_empty_range(self):
        search = SeedSearch(chunk_size=25)
        output = MT19937(999).generate()
        self.assertIsNone(search.search(output, 0, 60))
        self.assertIsNone(search.search(output, 10, 10))

    def test_time_window(self):
        now = 1_700_000_000
        seed = now - 97
        output = MT19937(seed).generate()

        search = SeedSearch(chunk_size=64)
        self.assertEqual(search.search_time_window(output, now=now, window_seconds=120), seed)

    def test_invalid_chunk_size(self):
        with self.assertRaises(ValueError):
            SeedSearch(chunk_size=0)


class TestExecutionMode(unittest.TestCase):

    def test_from_name(self):
        self.assertIs(ExecutionMode.from_name("multithread"), ExecutionMode.MULTITHREAD)
        self.assertIs(ExecutionMode.from_name("SEQUENTIAL"), ExecutionMode.SEQUENTIAL)
        with self.assertRaises(ValueError):
            ExecutionMode.from_name("gpu")


if __name__ == "__main__":
    unittest.main()
