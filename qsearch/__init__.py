"""
qsearch - Grover's search on a state-vector simulator.

This package provides a small state-vector simulator restricted to the gates
Grover's algorithm needs (X, H, Z, controlled-X/Z, pattern-controlled X),
an oracle library, and an amplitude amplification driver.

Modules:
    gates       - Gate matrices and immutable gate/circuit descriptors
    core        - AmplitudeVector, gate applicator, scratch qubits
    oracles     - Marking oracles and the phase oracle converter
    grover      - Grover driver (GroverSession, reflections)
    measurement - Probabilities and sampling
    session     - Handle-based entry points
    config      - Maximum register size
    utils       - State comparison, bit patterns, iteration counts

Quick Start:
    >>> from qsearch import *
    >>> handle = createRegister(3)
    >>> oracle = convert_to_phase_oracle(pattern_marker("101"))
    >>> session = runGroverSearch(handle, oracle, 2)
    >>> sampleOutcome(handle)  # 5 with probability ~0.95
"""

# Errors
from .errors import (
    QuantumError,
    InvalidDimension,
    IndexOutOfRange,
    InvalidGateSpec,
    InvalidArgument,
)

# Configuration
from .config import (
    DEFAULT_MAX_QUBITS,
    get_max_qubits,
    set_max_qubits,
    max_qubits,
    state_memory_bytes,
)

# Gates
from .gates import (
    X_gate,
    H_gate,
    Z_gate,
    AdjointKind,
    Gate,
    Circuit,
    X,
    H,
    Z,
    CX,
    CZ,
    PCX,
    on_each,
    conjugate,
)

# Core functionality
from .core import (
    AmplitudeVector,
    applyGate,
    applyAdjoint,
    applyX,
    applyH,
    applyZ,
    applyControlledX,
    applyControlledZ,
    applyPatternControlledX,
    applyPhaseFlipUnlessZero,
    scratch_qubit,
)

# Oracles
from .oracles import (
    mark_all_ones,
    mark_alternating_bits,
    mark_arbitrary_pattern,
    alternating_bits_circuit,
    pattern_marker,
    convert_to_phase_oracle,
    create_single_target_oracle,
    create_multi_target_oracle,
)

# Algorithms
from .grover import (
    GroverSession,
    grover_iteration,
    reflect_about_mean,
    reflect_about_mean_mcz,
    reflection_mcz_circuit,
    grover_search,
    grover_search_for_value,
)

# Measurement
from .measurement import (
    probabilities,
    sample,
    sample_counts,
    most_likely,
    marginal_probabilities,
)

# Session API
from .session import (
    createRegister,
    runGroverSearch,
    sampleOutcome,
    getProbabilities,
)

# Utilities
from .utils import (
    allclose_up_to_global_phase,
    state_fidelity,
    int_to_bits,
    bits_to_int,
    normalize_pattern,
    optimal_iterations,
    success_probability,
)

__version__ = "0.1.0"
__all__ = [
    # Errors
    "QuantumError",
    "InvalidDimension",
    "IndexOutOfRange",
    "InvalidGateSpec",
    "InvalidArgument",
    # Config
    "DEFAULT_MAX_QUBITS",
    "get_max_qubits",
    "set_max_qubits",
    "max_qubits",
    "state_memory_bytes",
    # Gates
    "X_gate",
    "H_gate",
    "Z_gate",
    "AdjointKind",
    "Gate",
    "Circuit",
    "X",
    "H",
    "Z",
    "CX",
    "CZ",
    "PCX",
    "on_each",
    "conjugate",
    # Core
    "AmplitudeVector",
    "applyGate",
    "applyAdjoint",
    "applyX",
    "applyH",
    "applyZ",
    "applyControlledX",
    "applyControlledZ",
    "applyPatternControlledX",
    "applyPhaseFlipUnlessZero",
    "scratch_qubit",
    # Oracles
    "mark_all_ones",
    "mark_alternating_bits",
    "mark_arbitrary_pattern",
    "alternating_bits_circuit",
    "pattern_marker",
    "convert_to_phase_oracle",
    "create_single_target_oracle",
    "create_multi_target_oracle",
    # Grover
    "GroverSession",
    "grover_iteration",
    "reflect_about_mean",
    "reflect_about_mean_mcz",
    "reflection_mcz_circuit",
    "grover_search",
    "grover_search_for_value",
    # Measurement
    "probabilities",
    "sample",
    "sample_counts",
    "most_likely",
    "marginal_probabilities",
    # Session
    "createRegister",
    "runGroverSearch",
    "sampleOutcome",
    "getProbabilities",
    # Utils
    "allclose_up_to_global_phase",
    "state_fidelity",
    "int_to_bits",
    "bits_to_int",
    "normalize_pattern",
    "optimal_iterations",
    "success_probability",
]
