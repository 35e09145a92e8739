"""
Measurement and sampling.

These functions read the register without changing it: sampling draws a
classical outcome from the squared amplitude magnitudes, and probabilities()
gives the exact distribution for assertion-based checks.
"""

import numpy as np
from typing import Dict, List, Optional, Sequence

from .core import AmplitudeVector
from .errors import InvalidArgument, InvalidGateSpec


def _rng(rng: Optional[np.random.Generator]) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def probabilities(vector: AmplitudeVector) -> List[float]:
    """
    Exact outcome distribution.

    Returns:
        List of 2^n probabilities, index = basis state (LSB first)
    """
    return (np.abs(vector.get_state()) ** 2).tolist()


def _weights(vector: AmplitudeVector) -> np.ndarray:
    # Generator.choice rejects p that is off from 1 by rounding
    prob = np.abs(vector.get_state()) ** 2
    return prob / prob.sum()


def sample(vector: AmplitudeVector, rng: Optional[np.random.Generator] = None) -> int:
    """Draw one basis index with probability |amplitude|²."""
    prob = _weights(vector)
    return int(_rng(rng).choice(prob.shape[0], p=prob))


def sample_counts(vector: AmplitudeVector, shots: int,
                  rng: Optional[np.random.Generator] = None) -> Dict[int, int]:
    """
    Draw `shots` outcomes and count them.

    Returns:
        Mapping from basis index to count, only for outcomes that occurred
    """
    if shots < 1:
        raise InvalidArgument(f"shots must be >= 1, got {shots}")
    prob = _weights(vector)
    draws = _rng(rng).choice(prob.shape[0], size=shots, p=prob)
    values, counts = np.unique(draws, return_counts=True)
    return {int(v): int(c) for v, c in zip(values, counts)}


def most_likely(vector: AmplitudeVector) -> int:
    """Basis index with the largest probability."""
    return int(np.argmax(np.abs(vector.get_state())))


def marginal_probabilities(vector: AmplitudeVector, qubits: Sequence[int]) -> List[float]:
    """
    Outcome distribution of a subset of qubits.

    The result is indexed LSB first in the order given: qubits[0] is bit 0.
    """
    qubits = list(qubits)
    if not qubits:
        raise InvalidArgument("at least one qubit is required")
    if len(qubits) != len(set(qubits)):
        raise InvalidGateSpec(f"the same qubit cannot occur twice: {qubits}")
    vector._check_qubits(qubits)

    prob = np.asarray(probabilities(vector))
    basis = np.arange(prob.shape[0])
    outcome = np.zeros(prob.shape[0], dtype=int)
    for k, q in enumerate(qubits):
        outcome |= ((basis >> q) & 1) << k
    return np.bincount(outcome, weights=prob, minlength=2 ** len(qubits)).tolist()
