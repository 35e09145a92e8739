"""
Runtime limits.

The only tunable is the maximum register size. State vectors grow as 2^n, so
every allocation is checked against this limit and fails fast with
InvalidDimension instead of exhausting memory.

The limit is read from the QSEARCH_MAX_QUBITS environment variable when set,
otherwise DEFAULT_MAX_QUBITS is used. set_max_qubits() overrides both.
"""

import os
from contextlib import contextmanager
from typing import Iterator, Optional

from .errors import InvalidArgument

DEFAULT_MAX_QUBITS = 24   # 2^24 complex128 amplitudes = 256 MiB
ENV_MAX_QUBITS = "QSEARCH_MAX_QUBITS"
BYTES_PER_AMPLITUDE = 16  # complex128

_override: Optional[int] = None


def _check_limit(n) -> int:
    if isinstance(n, bool) or not isinstance(n, int) or n < 1:
        raise InvalidArgument(f"max qubit count must be a positive integer, got {n!r}")
    return n


def get_max_qubits() -> int:
    """Return the current maximum number of qubits a register may hold."""
    if _override is not None:
        return _override

    raw = os.environ.get(ENV_MAX_QUBITS)
    if raw is None or raw.strip() == "":
        return DEFAULT_MAX_QUBITS
    try:
        value = int(raw)
    except ValueError:
        raise InvalidArgument(f"{ENV_MAX_QUBITS} must be an integer, got {raw!r}") from None
    return _check_limit(value)


def set_max_qubits(n: Optional[int]):
    """
    Set the maximum register size for this process.

    Args:
        n: New limit, or None to fall back to the environment/default value
    """
    global _override
    _override = None if n is None else _check_limit(n)


@contextmanager
def max_qubits(n: Optional[int]) -> Iterator[int]:
    """Temporarily change the qubit limit, restoring the previous one on exit."""
    global _override
    previous = _override
    set_max_qubits(n)
    try:
        yield get_max_qubits()
    finally:
        _override = previous


def state_memory_bytes(n: int) -> int:
    """Bytes needed for the amplitudes of an n-qubit state vector."""
    return BYTES_PER_AMPLITUDE * (2 ** n)
