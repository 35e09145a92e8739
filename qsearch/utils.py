"""
Utility functions for quantum search.

This module provides helper functions for:
- Quantum state comparison (accounting for global phase)
- Bit patterns and LSB-first integer conversion
- Grover iteration counts and success probabilities
"""

import math
import numpy as np
from typing import List, Sequence, Tuple, Union

from .errors import InvalidArgument


# =============================================================================
# Quantum state utilities
# =============================================================================

def allclose_up_to_global_phase(v, w, atol: float = 1e-9) -> bool:
    """
    Check if two quantum states are equal up to a global phase.

    Global phase has no physical significance, so two reflections that differ
    only by an overall factor of -1 describe the same operation.

    Args:
        v: First quantum state (array-like)
        w: Second quantum state (array-like)
        atol: Absolute tolerance for comparison

    Returns:
        True if states are equal up to global phase
    """
    v = np.asarray(v).reshape(-1)
    w = np.asarray(w).reshape(-1)
    if v.shape != w.shape:
        return False

    # Find a stable pivot amplitude in w
    idx = np.argmax(np.abs(w))
    if np.abs(w[idx]) < atol:
        # Both should be ~0 vectors; fallback to direct comparison
        return np.allclose(v, w, atol=atol)

    phase = v[idx] / w[idx]
    return np.allclose(v, phase * w, atol=atol)


def state_fidelity(v, w) -> float:
    """
    Compute the fidelity between two pure quantum states.

    Fidelity F = |⟨v|w⟩|² ranges from 0 (orthogonal) to 1 (identical).
    """
    v = np.asarray(v).reshape(-1)
    w = np.asarray(w).reshape(-1)
    return float(np.abs(np.vdot(v, w)) ** 2)


# =============================================================================
# Binary utilities
# =============================================================================

def int_to_bits(x: int, n: int) -> List[int]:
    """
    Convert integer to list of bits (LSB first).

    Args:
        x: Integer to convert
        n: Number of bits

    Returns:
        List of n bits, LSB first
    """
    return [(x >> i) & 1 for i in range(n)]


def bits_to_int(bits: Sequence[int]) -> int:
    """
    Convert list of bits (LSB first) to integer.

    Args:
        bits: List of bits, LSB first

    Returns:
        Integer value
    """
    result = 0
    for i, bit in enumerate(bits):
        result += bit * (2 ** i)
    return result


def normalize_pattern(pattern: Union[str, Sequence]) -> Tuple[int, ...]:
    """
    Turn a bit pattern into a tuple of 0/1 ints.

    Accepts a string such as "101", or a sequence of ints or bools.
    Position k of the pattern belongs to the k-th qubit it is paired with,
    so "101" over qubits [0, 1, 2] selects basis index 5.

    Raises:
        InvalidArgument: If any entry is not a 0/1 value
    """
    if isinstance(pattern, str):
        if any(c not in "01" for c in pattern):
            raise InvalidArgument(f"pattern string must contain only '0' and '1', got {pattern!r}")
        return tuple(int(c) for c in pattern)

    try:
        bits = tuple(pattern)
    except TypeError:
        raise InvalidArgument(f"pattern must be a string or a sequence, got {pattern!r}") from None

    result = []
    for bit in bits:
        if isinstance(bit, (bool, np.bool_)):
            result.append(int(bit))
        elif isinstance(bit, (int, np.integer)) and bit in (0, 1):
            result.append(int(bit))
        else:
            raise InvalidArgument(f"pattern entries must be 0 or 1, got {bit!r} in {pattern!r}")
    return tuple(result)


# =============================================================================
# Grover arithmetic
# =============================================================================

def optimal_iterations(N: int, M: int = 1) -> int:
    """
    Near-optimal number of Grover iterations, floor(π/4 · √(N/M)).

    Args:
        N: Size of the search space (2^n)
        M: Number of marked states

    Raises:
        InvalidArgument: If N < 1 or M is not in [1, N]
    """
    if N < 1:
        raise InvalidArgument(f"N must be >= 1, got {N}")
    if not (1 <= M <= N):
        raise InvalidArgument(f"M must be in [1, {N}], got {M}")
    return int(math.floor(math.pi / 4 * math.sqrt(N / M)))


def success_probability(n: int, M: int, iterations: int) -> float:
    """
    Probability of measuring a marked state after the given iterations.

    Closed form sin²((2k+1)θ) with sin θ = √(M/N).
    """
    N = 2 ** n
    if not (0 <= M <= N):
        raise InvalidArgument(f"M must be in [0, {N}], got {M}")
    if iterations < 0:
        raise InvalidArgument(f"iterations must be >= 0, got {iterations}")
    theta = math.asin(math.sqrt(M / N))
    return math.sin((2 * iterations + 1) * theta) ** 2
