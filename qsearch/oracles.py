"""
Oracles for Grover's search.

Two conventions are used:

    Marking oracle  oracle(vector, controls, target)
        Flips the target qubit when the controls satisfy a predicate.

    Phase oracle    oracle(vector, register)
        Negates the amplitude of every basis state of the register that
        satisfies the predicate. This is what the Grover driver consumes.

convert_to_phase_oracle() turns the first kind into the second by phase
kickback: the target is a scratch qubit prepared in |−⟩, an eigenstate of X
with eigenvalue -1, so "flip the target" becomes "negate the amplitude".

Bit patterns are read in the order of the control list: pattern[k] is the
value required of controls[k].
"""

import numpy as np
from typing import Callable, Iterable, List, Sequence

from .core import AmplitudeVector, applyControlledX, applyGate, applyH, applyPatternControlledX, applyX, scratch_qubit
from .errors import InvalidArgument
from .gates import CX, Circuit, X, conjugate, on_each
from .utils import int_to_bits, normalize_pattern

MarkingOracle = Callable[[AmplitudeVector, Sequence[int], int], None]
PhaseOracle = Callable[[AmplitudeVector, Sequence[int]], None]


# =============================================================================
# Marking oracles
# =============================================================================

def mark_all_ones(vector: AmplitudeVector, controls: Sequence[int], target: int):
    """Flip target iff every control qubit is 1."""
    applyControlledX(vector, controls, target)


def alternating_bits_circuit(controls: Sequence[int], target: int) -> Circuit:
    """
    Circuit marking the pattern 1010... over the controls.

    Odd-position controls are flipped so that the wanted pattern becomes
    all-ones, a plain controlled-X marks it, and the flips are undone.
    """
    controls = list(controls)
    flip_odd = on_each(X, controls[1::2])
    return conjugate(flip_odd, CX(controls, target))


def mark_alternating_bits(vector: AmplitudeVector, controls: Sequence[int], target: int):
    """Flip target iff even-position controls are 1 and odd-position controls are 0."""
    applyGate(vector, alternating_bits_circuit(controls, target))


def mark_arbitrary_pattern(vector: AmplitudeVector, controls: Sequence[int], target: int, pattern):
    """Flip target iff the controls equal pattern exactly."""
    applyPatternControlledX(vector, controls, pattern, target)


def pattern_marker(pattern) -> MarkingOracle:
    """Bind a pattern into a marking oracle with the (vector, controls, target) signature."""
    pattern = normalize_pattern(pattern)

    def oracle(vector: AmplitudeVector, controls: Sequence[int], target: int):
        mark_arbitrary_pattern(vector, controls, target, pattern)

    return oracle


# =============================================================================
# Phase oracles
# =============================================================================

def convert_to_phase_oracle(marking_oracle: MarkingOracle) -> PhaseOracle:
    """
    Turn a marking oracle into a phase oracle.

    The returned oracle borrows one scratch qubit, prepares it in |−⟩ (X then
    H), runs the marking oracle with the scratch qubit as target, and returns
    it to |0⟩ (H then X). The scratch qubit is released on every exit path,
    including when the marking oracle raises.

    Args:
        marking_oracle: Function (vector, controls, target) -> None

    Returns:
        Function (vector, register) -> None
    """
    if not callable(marking_oracle):
        raise InvalidArgument(f"marking oracle must be callable, got {marking_oracle!r}")

    def phase_oracle(vector: AmplitudeVector, register: Sequence[int]):
        register = list(register)
        with scratch_qubit(vector) as scratch:
            applyX(vector, scratch)
            applyH(vector, scratch)
            marking_oracle(vector, register, scratch)
            applyH(vector, scratch)
            applyX(vector, scratch)

    phase_oracle.marking_oracle = marking_oracle
    return phase_oracle


def create_single_target_oracle(target: int, n: int) -> PhaseOracle:
    """
    Create a phase oracle that marks a single value of an n-qubit register.

    Args:
        target: The value to search for (0 to 2^n - 1)
        n: Number of qubits. Must be >= 1.

    Returns:
        Phase oracle that can be passed to the Grover driver

    Raises:
        InvalidArgument: If n < 1 or target out of range
    """
    return create_multi_target_oracle([target], n)


def create_multi_target_oracle(targets: Iterable[int], n: int) -> PhaseOracle:
    """
    Create a phase oracle that marks every value in targets.

    The patterns of distinct values are disjoint, so flipping the same
    target once per value flips it exactly when the register holds one of
    them.

    Raises:
        InvalidArgument: If n < 1, targets is empty, or a value is out of range
    """
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n < 1:
        raise InvalidArgument(f"n must be an integer >= 1, got {n!r}")
    values = list(targets)
    if not values:
        raise InvalidArgument("at least one target value is required")
    for value in values:
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidArgument(f"target must be an integer, got {value!r}")
    values = sorted(set(int(value) for value in values))
    for value in values:
        if not (0 <= value < 2 ** n):
            raise InvalidArgument(f"target must be in [0, {2**n - 1}], got {value}")

    patterns: List[List[int]] = [int_to_bits(value, n) for value in values]

    def marker(vector: AmplitudeVector, controls: Sequence[int], target: int):
        if len(controls) != n:
            raise InvalidArgument(f"oracle built for {n} qubits, got a register of {len(controls)}")
        for pattern in patterns:
            mark_arbitrary_pattern(vector, controls, target, pattern)

    oracle = convert_to_phase_oracle(marker)
    oracle.targets = tuple(values)
    return oracle
