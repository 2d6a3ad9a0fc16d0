# mtengine/domain/engine/mersenne_twister.py
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .errors import InvalidIndexError, InvalidStateError, ReleasedEngineError
from .params import MT19937_64_PARAMS, MT19937_PARAMS, TwisterParams


def _undo_right_shift_xor(y: int, shift: int, mask: int, width: int) -> int:
    """Invert y = x ^ ((x >> shift) & mask); each pass recovers `shift` more high bits."""
    if shift == 0:
        raise ValueError("Cannot invert a zero shift")
    x = y
    for _ in range(width // shift + 1):
        x = y ^ ((x >> shift) & mask)
    return x


def _undo_left_shift_xor(y: int, shift: int, mask: int, width: int) -> int:
    """Invert y = x ^ ((x << shift) & mask) for a `width`-bit word."""
    if shift == 0:
        raise ValueError("Cannot invert a zero shift")
    word_mask = (1 << width) - 1
    x = y
    for _ in range(width // shift + 1):
        x = (y ^ ((x << shift) & mask)) & word_mask
    return x


class MersenneTwister:
    """
    Mersenne Twister generator over an arbitrary coefficient set.

    The output sequence is bit-exact with the reference implementations
    for the standard parameter sets. It is NOT cryptographically secure:
    n consecutive outputs are enough to reconstruct the whole state.

    An instance is not safe for concurrent use; callers sharing one engine
    across threads must serialize access themselves.
    """
    def __init__(self, params: TwisterParams, seed: Optional[int] = None):
        """
        Initialize the engine and seed it.

        Args:
            params: Coefficient set of the variant
            seed: Optional seed, truncated to the word size; the variant's
                default seed is used when omitted
        """
        self.params = params.validate()
        self.state: Optional[List[int]] = [0] * params.n
        self.index = params.n
        self.reseed(params.default_seed if seed is None else seed)

    @classmethod
    def from_state(cls, params: TwisterParams, state: Sequence[int], index: int) -> "MersenneTwister":
        """
        Build an engine from a raw state vector.

        Args:
            params: Coefficient set of the variant
            state: Exactly n words, copied into the new engine
            index: Position of the next word to temper, in [0, n]

        Raises:
            InvalidStateError: If the state has the wrong length or a word
                does not fit the word size
            InvalidIndexError: If index is outside [0, n]
        """
        return cls._restore(params, state, index)

    @classmethod
    def _restore(cls, params: TwisterParams, state: Sequence[int], index: int):
        engine = cls.__new__(cls)
        engine.params = params.validate()
        engine.state = [0] * params.n
        engine.index = params.n
        engine.set_state((state, index))
        return engine

    @property
    def word_size(self) -> int:
        return self.params.w

    @property
    def exhausted(self) -> bool:
        """True when the next extraction has to twist first."""
        return self.index >= self.params.n

    @property
    def released(self) -> bool:
        return self.state is None

    def reseed(self, seed: int) -> None:
        """Re-initialize the state from a seed; the next extraction twists."""
        state = self._live_state()
        p = self.params
        mask = p.word_mask
        shift = p.w - 2

        prev = state[0] = seed & mask
        for i in range(1, p.n):
            prev = state[i] = (p.f * (prev ^ (prev >> shift)) + i) & mask
        self.index = p.n

    def twist(self) -> None:
        """Advance the whole state by one block of n words."""
        state = self._live_state()
        p = self.params
        n, m, a = p.n, p.m, p.a
        upper, lower = p.upper_mask, p.lower_mask

        # In place: positions past i still hold the previous block, positions
        # wrapped around through i + m >= n already hold the new one.
        for i in range(n):
            y = (state[i] & upper) | (state[(i + 1) % n] & lower)
            value = state[(i + m) % n] ^ (y >> 1)
            if y & 1:
                value ^= a
            state[i] = value
        self.index = 0

    def temper(self, y: int) -> int:
        p = self.params
        y ^= (y >> p.u) & p.d
        y ^= (y << p.s) & p.b
        y ^= (y << p.t) & p.c
        y ^= y >> p.l
        return y & p.word_mask

    def untemper(self, y: int) -> int:
        """Exact inverse of temper() for any word-size value."""
        p = self.params
        y &= p.word_mask
        y = _undo_right_shift_xor(y, p.l, p.word_mask, p.w)
        y = _undo_left_shift_xor(y, p.t, p.c, p.w)
        y = _undo_left_shift_xor(y, p.s, p.b, p.w)
        y = _undo_right_shift_xor(y, p.u, p.d, p.w)
        return y

    def generate(self) -> int:
        """Return the next output word, twisting every n calls."""
        state = self._live_state()
        if self.index >= self.params.n:
            self.twist()
        y = self.temper(state[self.index])
        self.index += 1
        return y

    def generate_array(self, count: int) -> np.ndarray:
        """
        Generate a batch of output words.

        Args:
            count: Number of words to generate

        Returns:
            Array of uint32 (32-bit variants) or uint64 words
        """
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        dtype = np.uint32 if self.params.w <= 32 else np.uint64
        return np.fromiter((self.generate() for _ in range(count)), dtype=dtype, count=count)

    def get_state(self) -> Tuple[Tuple[int, ...], int]:
        """Snapshot of (state words, index) suitable for set_state()."""
        return tuple(self._live_state()), self.index

    def set_state(self, snapshot: Tuple[Sequence[int], int]) -> None:
        """
        Restore a snapshot produced by get_state() or collected elsewhere.

        Raises:
            InvalidStateError: If the state has the wrong length or a word
                does not fit the word size
            InvalidIndexError: If index is outside [0, n]
        """
        self._live_state()
        words, index = snapshot
        p = self.params
        # Plain ints: numpy scalars would wrap on the tempering shifts
        words = [int(word) for word in words]
        index = int(index)

        if len(words) != p.n:
            raise InvalidStateError(f"Expected {p.n} state words for {p.name}, got {len(words)}")
        for position, word in enumerate(words):
            if not 0 <= word <= p.word_mask:
                raise InvalidStateError(
                    f"State word {position} ({word:#x}) does not fit in {p.w} bits"
                )
        if not 0 <= index <= p.n:
            raise InvalidIndexError(index, p.n)

        self.state = words
        self.index = index

    def copy(self) -> "MersenneTwister":
        """Independent engine continuing the same sequence."""
        clone = self.__class__.__new__(self.__class__)
        clone.params = self.params
        clone.state = list(self._live_state())
        clone.index = self.index
        return clone

    def release(self) -> None:
        """Drop the state; the engine cannot generate afterwards."""
        self.state = None

    def _live_state(self) -> List[int]:
        if self.state is None:
            raise ReleasedEngineError(f"{self.params.name} engine has been released")
        return self.state

    def __iter__(self) -> Iterator[int]:
        return self

    def __next__(self) -> int:
        return self.generate()

    def __repr__(self) -> str:
        if self.state is None:
            return f"{self.__class__.__name__}(params={self.params.name}, released)"
        return f"{self.__class__.__name__}(params={self.params.name}, index={self.index})"


class MT19937(MersenneTwister):
    """32-bit Mersenne Twister (std::mt19937)."""
    def __init__(self, seed: Optional[int] = None):
        super().__init__(MT19937_PARAMS, seed)

    @classmethod
    def restore(cls, state: Sequence[int], index: int) -> "MT19937":
        """Build an MT19937 from 624 state words and an index."""
        return cls._restore(MT19937_PARAMS, state, index)


class MT19937_64(MersenneTwister):
    """64-bit Mersenne Twister (std::mt19937_64)."""
    def __init__(self, seed: Optional[int] = None):
        super().__init__(MT19937_64_PARAMS, seed)

    @classmethod
    def restore(cls, state: Sequence[int], index: int) -> "MT19937_64":
        return cls._restore(MT19937_64_PARAMS, state, index)


def create_engine(params: TwisterParams, seed: Optional[int] = None) -> MersenneTwister:
    """Build an engine for a parameter set, using the named subclass when one exists."""
    if params == MT19937_PARAMS:
        return MT19937(seed)
    if params == MT19937_64_PARAMS:
        return MT19937_64(seed)
    return MersenneTwister(params, seed)


def restore_engine(params: TwisterParams, state: Sequence[int], index: int) -> MersenneTwister:
    """Counterpart of create_engine() for a raw state vector."""
    if params == MT19937_PARAMS:
        return MT19937.restore(state, index)
    if params == MT19937_64_PARAMS:
        return MT19937_64.restore(state, index)
    return MersenneTwister.from_state(params, state, index)
