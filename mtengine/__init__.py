# mtengine/__init__.py
"""
Bit-exact Mersenne Twister engines (MT19937 and MT19937-64).

Mersenne Twister is NOT cryptographically secure; this package exists
for reproducible simulation and for demonstrating attacks on it.
"""
from mtengine.application.registry.handle_registry import (
    AllocationFailureError,
    HandleRegistry,
    InvalidHandleError,
    create_32,
    create_64,
    default_32,
    default_64,
    generate_32,
    generate_64,
    release_32,
    release_64,
)
from mtengine.domain.engine.errors import (
    InvalidCoefficientsError,
    InvalidIndexError,
    InvalidStateError,
    MersenneTwisterError,
    ReleasedEngineError,
)
from mtengine.domain.engine.mersenne_twister import MT19937, MT19937_64, MersenneTwister
from mtengine.domain.engine.params import MT19937_64_PARAMS, MT19937_PARAMS, TwisterParams

__version__ = "0.1.0"

__all__ = [
    'MersenneTwister', 'MT19937', 'MT19937_64',
    'TwisterParams', 'MT19937_PARAMS', 'MT19937_64_PARAMS',
    'MersenneTwisterError', 'InvalidCoefficientsError', 'InvalidStateError',
    'InvalidIndexError', 'ReleasedEngineError',
    'HandleRegistry', 'InvalidHandleError', 'AllocationFailureError',
    'default_32', 'create_32', 'generate_32', 'release_32',
    'default_64', 'create_64', 'generate_64', 'release_64',
]
