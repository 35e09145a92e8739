"""
Handle-based entry points.

A handle is simply the AmplitudeVector returned by createRegister(); every
function takes it explicitly, so there is no process-wide quantum state.

    >>> handle = createRegister(3)
    >>> session = runGroverSearch(handle, create_single_target_oracle(5, 3), 2)
    >>> getProbabilities(handle)[5] > 0.9
    True
"""

import numpy as np
from typing import List, Optional, Sequence

from .core import AmplitudeVector, applyGate
from .grover import GroverSession, PhaseOracle
from .measurement import probabilities, sample


def createRegister(n: int) -> AmplitudeVector:
    """Create an n-qubit register in |0...0⟩ and return its handle."""
    return AmplitudeVector.initialize(n)


def runGroverSearch(handle: AmplitudeVector, oracle: PhaseOracle, iterations: int,
                    register: Optional[Sequence[int]] = None,
                    reflection: str = "hadamard") -> GroverSession:
    """
    Run Grover's algorithm on the handle's register in place.

    Returns:
        The finished session, for inspection
    """
    return GroverSession(handle, oracle, iterations, register, reflection).run()


def sampleOutcome(handle: AmplitudeVector, rng: Optional[np.random.Generator] = None) -> int:
    """Draw one basis index from the register's distribution."""
    return sample(handle, rng)


def getProbabilities(handle: AmplitudeVector) -> List[float]:
    """Exact outcome distribution of the register."""
    return probabilities(handle)


__all__ = [
    "createRegister",
    "applyGate",
    "runGroverSearch",
    "sampleOutcome",
    "getProbabilities",
]
