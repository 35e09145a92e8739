"""
Quantum gate definitions.

This module contains the gate matrices used by the simulator (X, H, Z) and
the immutable gate descriptors that the oracle library and the Grover driver
compose into circuits.

A descriptor names a gate and the qubits it acts on; it holds no state, so
the same descriptor can be applied to any number of registers. Every gate
in the set is its own inverse. A Circuit is inverted by reversing its steps
and inverting each one, which is what makes "wrap-then-invert" oracles
(conjugate) work.
"""

import enum
import numpy as np
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple, Union

from .errors import IndexOutOfRange, InvalidArgument, InvalidGateSpec
from .utils import normalize_pattern

# =============================================================================
# Single-qubit gate matrices
# =============================================================================

X_gate = np.array([[0, 1],      # Pauli X gate (NOT gate)
                   [1, 0]])

Z_gate = np.array([[1,  0],     # Pauli Z gate
                   [0, -1]])

H_gate = np.array([[1,  1],     # Hadamard gate
                   [1, -1]]) * np.sqrt(1/2)

SINGLE_QUBIT_MATRICES = {
    "X": X_gate,
    "H": H_gate,
    "Z": Z_gate,
}


# =============================================================================
# Descriptors
# =============================================================================

class AdjointKind(enum.Enum):
    """How the inverse of a descriptor is obtained."""
    SELF_ADJOINT = "self-adjoint"
    INVERTED_SEQUENCE = "inverted-sequence"


UNCONTROLLED = frozenset({"X", "H", "Z"})
CONTROLLED = frozenset({"CX", "CZ"})
PATTERN_CONTROLLED = frozenset({"PCX"})
GATE_NAMES = UNCONTROLLED | CONTROLLED | PATTERN_CONTROLLED


def _check_index(q) -> int:
    if isinstance(q, (bool, np.bool_)) or not isinstance(q, (int, np.integer)):
        raise InvalidGateSpec(f"qubit index must be an integer, got {q!r}")
    if q < 0:
        raise IndexOutOfRange(f"qubit index must be >= 0, got {q}")
    return int(q)


@dataclass(frozen=True)
class Gate:
    """
    A named gate acting on one target and optional controls.

    Attributes:
        name: One of X, H, Z, CX, CZ, PCX
        target: Target qubit index
        controls: Control qubit indices (empty for X, H, Z)
        pattern: Required control values for PCX, one per control
    """
    name: str
    target: int
    controls: Tuple[int, ...] = ()
    pattern: Optional[Tuple[int, ...]] = None

    def __post_init__(self):
        if self.name not in GATE_NAMES:
            raise InvalidGateSpec(f"unknown gate {self.name!r}")

        target = _check_index(self.target)
        controls = tuple(_check_index(c) for c in self.controls)
        object.__setattr__(self, "target", target)
        object.__setattr__(self, "controls", controls)

        qubits = controls + (target,)
        if len(qubits) != len(set(qubits)):
            raise InvalidGateSpec(f"the same qubit cannot occur twice in {self.name}: {qubits}")

        if self.name in UNCONTROLLED and controls:
            raise InvalidGateSpec(f"{self.name} takes no controls, got {controls}")

        if self.name in PATTERN_CONTROLLED:
            if self.pattern is None:
                raise InvalidGateSpec("PCX requires a control pattern")
            pattern = normalize_pattern(self.pattern)
            if len(pattern) != len(controls):
                raise InvalidArgument(
                    f"pattern length {len(pattern)} does not match {len(controls)} controls")
            object.__setattr__(self, "pattern", pattern)
        elif self.pattern is not None:
            raise InvalidGateSpec(f"{self.name} does not take a pattern")

    @property
    def qubits(self) -> Tuple[int, ...]:
        return self.controls + (self.target,)

    @property
    def adjoint_kind(self) -> AdjointKind:
        return AdjointKind.SELF_ADJOINT

    def adjoint(self) -> "Gate":
        return self

    def __add__(self, other: "Operation") -> "Circuit":
        return Circuit((self,)) + other


class Circuit:
    """
    An immutable sequence of gates and sub-circuits, applied in order.

    The adjoint runs the steps in reverse order, each replaced by its own
    adjoint.
    """

    __slots__ = ("_steps",)

    def __init__(self, steps: Iterable["Operation"] = ()):
        steps = tuple(steps)
        for step in steps:
            if not isinstance(step, (Gate, Circuit)):
                raise InvalidGateSpec(f"circuit steps must be Gate or Circuit, got {step!r}")
        self._steps = steps

    @property
    def steps(self) -> Tuple["Operation", ...]:
        return self._steps

    @property
    def adjoint_kind(self) -> AdjointKind:
        return AdjointKind.INVERTED_SEQUENCE

    def adjoint(self) -> "Circuit":
        return Circuit(step.adjoint() for step in reversed(self._steps))

    def flatten(self) -> Iterator[Gate]:
        """Yield the gates of this circuit and its sub-circuits in order."""
        for step in self._steps:
            if isinstance(step, Circuit):
                yield from step.flatten()
            else:
                yield step

    @property
    def qubits(self) -> Tuple[int, ...]:
        seen = []
        for gate in self.flatten():
            for q in gate.qubits:
                if q not in seen:
                    seen.append(q)
        return tuple(seen)

    def __add__(self, other: "Operation") -> "Circuit":
        if isinstance(other, Gate):
            return Circuit(self._steps + (other,))
        if isinstance(other, Circuit):
            return Circuit(self._steps + other._steps)
        return NotImplemented

    def __iter__(self) -> Iterator["Operation"]:
        return iter(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Circuit):
            return NotImplemented
        return tuple(self.flatten()) == tuple(other.flatten())

    def __hash__(self) -> int:
        return hash(tuple(self.flatten()))

    def __repr__(self) -> str:
        return f"Circuit({list(self._steps)!r})"


Operation = Union[Gate, Circuit]


# =============================================================================
# Factories
# =============================================================================

def X(q: int) -> Gate:
    return Gate("X", q)


def H(q: int) -> Gate:
    return Gate("H", q)


def Z(q: int) -> Gate:
    return Gate("Z", q)


def CX(controls: Iterable[int], target: int) -> Gate:
    """Flip target when every control is 1."""
    return Gate("CX", target, tuple(controls))


def CZ(controls: Iterable[int], target: int) -> Gate:
    """Negate amplitudes where every listed qubit (controls and target) is 1."""
    return Gate("CZ", target, tuple(controls))


def PCX(controls: Iterable[int], pattern, target: int) -> Gate:
    """Flip target when the controls match the given 0/1 pattern exactly."""
    return Gate("PCX", target, tuple(controls), pattern)


def on_each(factory, qubits: Iterable[int]) -> Circuit:
    """Apply a single-qubit gate factory to every qubit, e.g. on_each(H, register)."""
    return Circuit(factory(q) for q in qubits)


def conjugate(outer: Operation, inner: Operation) -> Circuit:
    """
    Build outer · inner · outer†.

    Used for basis changes around a gate, such as flipping some controls to
    turn an all-ones condition into an arbitrary pattern.
    """
    return Circuit((outer, inner, outer.adjoint()))
