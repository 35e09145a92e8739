"""
Core quantum simulation functionality.

This module provides the state-vector simulator: the AmplitudeVector that
holds a register's amplitudes, the gate applicator that transforms it in
place, and the scratch qubit guard used by phase oracles.

Bit ordering convention:
    Qubit i is bit i of the basis index (LSB first), so the amplitude of
    basis state |b_{n-1} ... b_1 b_0⟩ lives at index sum(b_i * 2^i).

Every gate is validated against the register before any amplitude is
touched, so a failed call leaves the vector unchanged.
"""

import logging
import numpy as np
from contextlib import contextmanager
from typing import Iterable, Iterator, List, Sequence

from .config import get_max_qubits, state_memory_bytes
from .errors import IndexOutOfRange, InvalidArgument, InvalidDimension, InvalidGateSpec
from .gates import (
    SINGLE_QUBIT_MATRICES,
    _check_index,
    Circuit,
    Gate,
    Operation,
    CX,
    CZ,
    PCX,
    H,
    X,
    Z,
)

logger = logging.getLogger(__name__)

NORM_ATOL = 1e-9


def _check_dimension(n) -> int:
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
        raise InvalidDimension(f"number of qubits must be an integer, got {n!r}")
    if n <= 0:
        raise InvalidDimension(f"number of qubits must be >= 1, got {n}")
    limit = get_max_qubits()
    if n > limit:
        raise InvalidDimension(
            f"{n} qubits exceeds the limit of {limit} "
            f"({state_memory_bytes(n)} bytes of amplitudes)")
    return int(n)


def _allocate(dimension: int) -> np.ndarray:
    try:
        return np.zeros(dimension, dtype=np.complex128)
    except MemoryError:
        raise InvalidDimension(f"cannot allocate a state vector of {dimension} amplitudes") from None


class AmplitudeVector:
    """
    The state of an n-qubit register: 2^n complex amplitudes.

    A new vector is in |0...0⟩. The amplitudes are only changed through the
    gate applicator functions of this module and the scratch qubit guard.
    """

    def __init__(self, n: int):
        self._n = _check_dimension(n)
        self._state = _allocate(2 ** self._n)
        self._state[0] = 1.0

    @classmethod
    def initialize(cls, n: int) -> "AmplitudeVector":
        """Create an n-qubit register in the |0...0⟩ state."""
        return cls(n)

    @classmethod
    def from_amplitudes(cls, amplitudes: Sequence[complex], atol: float = NORM_ATOL) -> "AmplitudeVector":
        """
        Create a register holding the given amplitudes.

        Args:
            amplitudes: 2^n amplitudes, index = basis state (LSB first)
            atol: Tolerance on the norm

        Raises:
            InvalidDimension: If the length is not a power of two >= 2
            InvalidArgument: If the amplitudes are not normalized
        """
        values = np.asarray(amplitudes, dtype=np.complex128).reshape(-1)
        size = values.shape[0]
        if size < 2 or size & (size - 1):
            raise InvalidDimension(f"amplitude count must be a power of two >= 2, got {size}")
        norm = float(np.vdot(values, values).real)
        if abs(norm - 1.0) > atol:
            raise InvalidArgument(f"amplitudes must be normalized, got norm squared {norm}")

        vector = cls(size.bit_length() - 1)
        vector._state[:] = values
        return vector

    @property
    def num_qubits(self) -> int:
        return self._n

    @property
    def dimension(self) -> int:
        return self._state.shape[0]

    def get_state(self) -> np.ndarray:
        """Return a copy of the amplitudes."""
        return self._state.copy()

    def normSquared(self) -> float:
        """Sum of squared magnitudes; stays at 1.0 under unitary gates."""
        return float(np.vdot(self._state, self._state).real)

    def is_normalized(self, atol: float = NORM_ATOL) -> bool:
        return abs(self.normSquared() - 1.0) <= atol

    def copy(self) -> "AmplitudeVector":
        """Return an independent snapshot of this register."""
        other = object.__new__(AmplitudeVector)
        other._n = self._n
        other._state = self._state.copy()
        return other

    def __len__(self) -> int:
        return self.dimension

    def __repr__(self) -> str:
        return f"AmplitudeVector(num_qubits={self._n})"

    # -------------------------------------------------------------------------
    # Internal helpers used by the gate applicator
    # -------------------------------------------------------------------------

    def _check_qubits(self, qubits: Iterable[int]):
        for q in qubits:
            q = _check_index(q)
            if q >= self._n:
                raise IndexOutOfRange(f"qubit {q} out of range for a {self._n}-qubit register")

    def _basis(self) -> np.ndarray:
        return np.arange(self.dimension)

    def _match(self, qubits: Sequence[int], values: Sequence[int]) -> np.ndarray:
        """Boolean mask of basis indices whose listed qubits equal values."""
        basis = self._basis()
        mask = np.ones(self.dimension, dtype=bool)
        for q, v in zip(qubits, values):
            mask &= ((basis >> q) & 1) == v
        return mask


# =============================================================================
# Gate kernels (no validation; callers validate first)
# =============================================================================

def _apply_single(vector: AmplitudeVector, matrix: np.ndarray, index: int):
    # Axis 1 of the view is bit `index`; axis 0 the higher bits, axis 2 the lower bits
    view = np.reshape(vector._state, (-1, 2, 2 ** index))
    vector._state[:] = np.reshape(np.matmul(matrix, view), -1)


def _apply_controlled_x(vector: AmplitudeVector, controls, pattern, target: int):
    mask = vector._match(controls, pattern)
    mask &= ((vector._basis() >> target) & 1) == 0
    lo = np.flatnonzero(mask)
    hi = lo | (1 << target)
    state = vector._state
    state[lo], state[hi] = state[hi], state[lo]


def _apply_controlled_z(vector: AmplitudeVector, qubits):
    mask = vector._match(qubits, [1] * len(qubits))
    vector._state[mask] *= -1


def _run(vector: AmplitudeVector, gate: Gate):
    if gate.name in SINGLE_QUBIT_MATRICES:
        _apply_single(vector, SINGLE_QUBIT_MATRICES[gate.name], gate.target)
    elif gate.name == "CX":
        _apply_controlled_x(vector, gate.controls, [1] * len(gate.controls), gate.target)
    elif gate.name == "PCX":
        _apply_controlled_x(vector, gate.controls, gate.pattern, gate.target)
    elif gate.name == "CZ":
        _apply_controlled_z(vector, gate.qubits)
    else:
        raise InvalidGateSpec(f"no kernel for gate {gate.name!r}")


# =============================================================================
# Gate applicator
# =============================================================================

def applyGate(vector: AmplitudeVector, op: Operation):
    """
    Apply a gate or a circuit to the register in place.

    A circuit is checked in full before its first gate runs.

    Args:
        vector: The register
        op: A Gate descriptor or a Circuit

    Raises:
        IndexOutOfRange: If a qubit index is outside the register
        InvalidGateSpec: If op is not a Gate or Circuit
    """
    if isinstance(op, Gate):
        gates: List[Gate] = [op]
    elif isinstance(op, Circuit):
        gates = list(op.flatten())
    else:
        raise InvalidGateSpec(f"expected a Gate or Circuit, got {op!r}")

    for gate in gates:
        vector._check_qubits(gate.qubits)
    for gate in gates:
        _run(vector, gate)


def applyAdjoint(vector: AmplitudeVector, op: Operation):
    """Apply the inverse of a gate or circuit."""
    if not isinstance(op, (Gate, Circuit)):
        raise InvalidGateSpec(f"expected a Gate or Circuit, got {op!r}")
    applyGate(vector, op.adjoint())


def applyX(vector: AmplitudeVector, index: int):
    """Swap amplitude pairs whose basis indices differ only in bit `index`."""
    applyGate(vector, X(index))


def applyH(vector: AmplitudeVector, index: int):
    """Replace each pair (a, b) differing in bit `index` with ((a+b)/√2, (a-b)/√2)."""
    applyGate(vector, H(index))


def applyZ(vector: AmplitudeVector, index: int):
    """Negate every amplitude whose bit `index` is 1."""
    applyGate(vector, Z(index))


def applyControlledX(vector: AmplitudeVector, controls: Sequence[int], target: int):
    """Apply X on target where all control bits are 1."""
    applyGate(vector, CX(controls, target))


def applyControlledZ(vector: AmplitudeVector, controls: Sequence[int], target: int):
    """
    Negate amplitudes where all control bits and the target bit are 1.

    Symmetric in all listed qubits; the target is only a naming convenience.
    """
    applyGate(vector, CZ(controls, target))


def applyPatternControlledX(vector: AmplitudeVector, controls: Sequence[int], pattern, target: int):
    """
    Apply X on target where the control bits match pattern exactly.

    pattern[k] is the required value of controls[k]; an all-ones pattern is
    a plain controlled-X.
    """
    applyGate(vector, PCX(controls, pattern, target))


def applyPhaseFlipUnlessZero(vector: AmplitudeVector, qubits: Sequence[int]):
    """
    Negate every amplitude whose listed qubits are not all zero.

    This is the conditional phase flip 2|0⟩⟨0| - I restricted to `qubits`.
    """
    qubits = list(qubits)
    if not qubits:
        raise InvalidArgument("phase flip needs at least one qubit")
    if len(qubits) != len(set(qubits)):
        raise InvalidGateSpec(f"the same qubit cannot occur twice: {qubits}")
    vector._check_qubits(qubits)

    mask = vector._match(qubits, [0] * len(qubits))
    vector._state[~mask] *= -1


# =============================================================================
# Scratch qubits
# =============================================================================

@contextmanager
def scratch_qubit(vector: AmplitudeVector) -> Iterator[int]:
    """
    Borrow one extra qubit in |0⟩ for the duration of a with-block.

    The qubit is appended as the most significant bit and its index is
    yielded. On exit, normal or not, it is removed again. A caller is
    expected to return it to |0⟩; if it did not, the qubit is projected out
    (collapsing the register as a measurement would) and a warning is logged.

    Raises:
        InvalidDimension: If one more qubit would exceed the qubit limit
    """
    n = vector.num_qubits
    _check_dimension(n + 1)

    grown = _allocate(2 * vector.dimension)
    grown[:vector.dimension] = vector._state
    vector._state = grown
    vector._n = n + 1
    logger.debug("allocated scratch qubit %d", n)

    try:
        yield n
    finally:
        _release_top_qubit(vector, n)


def _release_top_qubit(vector: AmplitudeVector, index: int):
    if vector._n != index + 1:
        raise InvalidArgument(
            f"scratch qubit {index} released out of order ({vector._n} qubits allocated)")

    half = vector.dimension // 2
    lower = vector._state[:half]
    upper = vector._state[half:]
    p1 = float(np.vdot(upper, upper).real)

    if p1 < NORM_ATOL:
        kept = lower.copy()
    else:
        logger.warning("scratch qubit %d released in a non-zero state (P(1)=%.3g); projecting it out",
                       index, p1)
        p0 = float(np.vdot(lower, lower).real)
        if p0 >= NORM_ATOL:
            kept = lower / np.sqrt(p0)
        else:
            kept = upper / np.sqrt(p1)

    vector._state = kept
    vector._n = index
    logger.debug("released scratch qubit %d", index)
