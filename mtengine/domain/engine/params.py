# mtengine/domain/engine/params.py
from dataclasses import dataclass

from .errors import InvalidCoefficientsError


@dataclass(frozen=True)
class TwisterParams:
    """
    Coefficient set of a Mersenne Twister variant.

    Names follow the published description of the algorithm:
    w word size, n state length, m twist offset, r separation point,
    a twist matrix coefficient, (u, d) (s, b) (t, c) l tempering shifts and
    masks, f seeding multiplier.
    """
    name: str
    w: int
    n: int
    m: int
    r: int
    a: int
    u: int
    d: int
    s: int
    b: int
    t: int
    c: int
    l: int
    f: int
    default_seed: int = 5489

    @property
    def word_mask(self) -> int:
        return (1 << self.w) - 1

    @property
    def lower_mask(self) -> int:
        return (1 << self.r) - 1

    @property
    def upper_mask(self) -> int:
        return ~self.lower_mask & self.word_mask

    @property
    def word_bytes(self) -> int:
        """Number of bytes needed to serialize one output word."""
        return (self.w + 7) // 8

    def validate(self) -> "TwisterParams":
        """
        Check the coefficient set.

        Returns:
            self, so the call can be chained

        Raises:
            InvalidCoefficientsError: If any coefficient is out of range
        """
        if not 1 <= self.w <= 64:
            raise InvalidCoefficientsError(self.name, f"word size {self.w} not in 1..64")
        if self.n < 1:
            raise InvalidCoefficientsError(self.name, f"state length {self.n} must be positive")
        if self.n > 1 and not 1 <= self.m < self.n:
            raise InvalidCoefficientsError(self.name, f"twist offset {self.m} not in 1..{self.n - 1}")
        if not 0 <= self.r <= self.w:
            raise InvalidCoefficientsError(self.name, f"separation point {self.r} exceeds word size")

        for label in ("u", "s", "t", "l"):
            shift = getattr(self, label)
            if not 0 <= shift <= self.w:
                raise InvalidCoefficientsError(self.name, f"shift {label}={shift} exceeds word size")

        for label in ("a", "d", "b", "c", "f"):
            value = getattr(self, label)
            if value < 0 or value > self.word_mask:
                raise InvalidCoefficientsError(self.name, f"{label}={value:#x} is wider than {self.w} bits")

        return self


MT19937_PARAMS = TwisterParams(
    name="mt19937",
    w=32,
    n=624,
    m=397,
    r=31,
    a=0x9908B0DF,
    u=11,
    d=0xFFFFFFFF,
    s=7,
    b=0x9D2C5680,
    t=15,
    c=0xEFC60000,
    l=18,
    f=1812433253,
)

MT19937_64_PARAMS = TwisterParams(
    name="mt19937_64",
    w=64,
    n=312,
    m=156,
    r=31,
    a=0xB5026F5AA96619E9,
    u=29,
    d=0x5555555555555555,
    s=17,
    b=0x71D67FFFEDA60000,
    t=37,
    c=0xFFF7EEE000000000,
    l=43,
    f=6364136223846793005,
)

PARAMS_BY_WIDTH = {
    32: MT19937_PARAMS,
    64: MT19937_64_PARAMS,
}


def params_for_width(width: int) -> TwisterParams:
    """
    Look up the standard parameter set for a word width.

    Raises:
        ValueError: If no standard variant exists for the width
    """
    if width not in PARAMS_BY_WIDTH:
        raise ValueError(f"Unsupported word width: {width} (expected 32 or 64)")
    return PARAMS_BY_WIDTH[width]
