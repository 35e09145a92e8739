"""
Exception hierarchy for the simulator.

All errors are usage errors detected before the state vector is touched,
so catching one never leaves a half-applied gate behind.
"""


class QuantumError(ValueError):
    """Base class for every error raised by qsearch."""


class InvalidDimension(QuantumError):
    """Register size outside the supported bounds (or not allocatable)."""


class IndexOutOfRange(QuantumError):
    """Qubit index outside [0, num_qubits)."""


class InvalidGateSpec(QuantumError):
    """Malformed gate descriptor, e.g. the same qubit used twice."""


class InvalidArgument(QuantumError):
    """Bad argument such as a negative iteration count or a bad pattern."""
