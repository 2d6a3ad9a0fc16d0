# mtengine/domain/analysis/cloning.py
from typing import Sequence

from mtengine.domain.engine.errors import InvalidStateError
from mtengine.domain.engine.mersenne_twister import MersenneTwister, create_engine, restore_engine
from mtengine.domain.engine.params import MT19937_PARAMS, TwisterParams


def clone_from_outputs(outputs: Sequence[int], params: TwisterParams = MT19937_PARAMS) -> MersenneTwister:
    """
    Rebuild an engine from n consecutive outputs.

    The outputs must start right after a twist (the first n outputs of a
    freshly seeded engine, or any later block aligned the same way). The
    returned engine produces the outputs that follow them.

    Args:
        outputs: Exactly n observed output words
        params: Coefficient set of the observed generator

    Returns:
        Engine predicting the rest of the observed stream

    Raises:
        InvalidStateError: If the number of outputs is not n
    """
    if len(outputs) != params.n:
        raise InvalidStateError(
            f"Cloning {params.name} needs exactly {params.n} outputs, got {len(outputs)}"
        )

    # Any engine of the right variant can untemper
    template = create_engine(params, 0)
    state = [template.untemper(value) for value in outputs]
    return restore_engine(params, state, params.n)


def clone_engine(engine: MersenneTwister) -> MersenneTwister:
    """
    Clone a live engine by observing its output only.

    Consumes n outputs from `engine`; afterwards the clone and the original
    produce identical sequences. The tap must begin on a twist boundary,
    i.e. the engine must be exhausted.

    Raises:
        InvalidStateError: If the engine is mid-block
    """
    if not engine.exhausted:
        raise InvalidStateError(
            f"Engine is {engine.index} words into a block; outputs would not align with the state"
        )
    outputs = [engine.generate() for _ in range(engine.params.n)]
    return clone_from_outputs(outputs, engine.params)
