# tests/test_params.py
import dataclasses
import os
import sys
import unittest

# Add repository root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from mtengine.domain.engine.errors import InvalidCoefficientsError
from mtengine.domain.engine.mersenne_twister import MersenneTwister
from mtengine.domain.engine.params import MT19937_64_PARAMS, MT19937_PARAMS, params_for_width


class TestTwisterParams(unittest.TestCase):

    def test_standard_sets_validate(self):
        self.assertIs(MT19937_PARAMS.validate(), MT19937_PARAMS)
        self.assertIs(MT19937_64_PARAMS.validate(), MT19937_64_PARAMS)

    def test_masks(self):
        self.assertEqual(MT19937_PARAMS.word_mask, 0xFFFFFFFF)
        self.assertEqual(MT19937_PARAMS.upper_mask, 0x80000000)
        self.assertEqual(MT19937_PARAMS.lower_mask, 0x7FFFFFFF)
        self.assertEqual(MT19937_64_PARAMS.upper_mask, 0xFFFFFFFF80000000)
        self.assertEqual(MT19937_64_PARAMS.lower_mask, 0x7FFFFFFF)

    def test_word_bytes(self):
        self.assertEqual(MT19937_PARAMS.word_bytes, 4)
        self.assertEqual(MT19937_64_PARAMS.word_bytes, 8)

    def test_params_for_width(self):
        self.assertIs(params_for_width(32), MT19937_PARAMS)
        self.assertIs(params_for_width(64), MT19937_64_PARAMS)
        with self.assertRaises(ValueError):
            params_for_width(16)

    def test_invalid_coefficients(self):
        broken = [
            dataclasses.replace(MT19937_PARAMS, w=65),
            dataclasses.replace(MT19937_PARAMS, n=0),
            dataclasses.replace(MT19937_PARAMS, m=624),
            dataclasses.replace(MT19937_PARAMS, r=33),
            dataclasses.replace(MT19937_PARAMS, u=40),
            dataclasses.replace(MT19937_PARAMS, a=1 << 32),
            dataclasses.replace(MT19937_PARAMS, f=-1),
        ]
        for params in broken:
            with self.assertRaises(InvalidCoefficientsError):
                params.validate()

    def test_engine_refuses_invalid_coefficients(self):
        with self.assertRaises(InvalidCoefficientsError):
            MersenneTwister(dataclasses.replace(MT19937_64_PARAMS, l=70))

    def test_params_are_frozen(self):
        with self.assertRaises(dataclasses.FrozenInstanceError):
            MT19937_PARAMS.n = 10


if __name__ == "__main__":
    unittest.main()
