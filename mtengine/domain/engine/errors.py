# mtengine/domain/engine/errors.py


class MersenneTwisterError(Exception):
    """Base class for all errors raised by the twister engine and its wrappers."""
    pass


class InvalidCoefficientsError(MersenneTwisterError):
    """The parameter set cannot describe a valid generator."""
    def __init__(self, name, reason):
        self.name = name
        self.reason = reason
        self.message = f"Invalid mersenne twister coefficients for {name}: {reason}"
        super().__init__(self.message)


class InvalidStateError(MersenneTwisterError):
    """A state vector has the wrong length or holds words wider than the engine."""
    pass


class InvalidIndexError(MersenneTwisterError):
    """A state index lies outside [0, n]."""
    def __init__(self, index, n):
        self.index = index
        self.n = n
        self.message = f"Invalid mersenne twister index {index} (expected 0..{n})"
        super().__init__(self.message)


class ReleasedEngineError(MersenneTwisterError):
    """The engine's state was released and it can no longer produce output."""
    pass
