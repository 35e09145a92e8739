"""
Grover's search algorithm implementation.

Grover's algorithm provides quadratic speedup for unstructured search problems.
Given a phase oracle that negates the amplitudes of the M marked basis states
out of N = 2^n, about π/4·√(N/M) Grover iterations make a marked state the
likely measurement outcome.

A run has two phases:
    1. Hadamard transform on every register qubit (uniform superposition).
    2. `iterations` times: the phase oracle, then reflection about the
       uniform superposition.

The reflection has two interchangeable forms that differ only by a global
phase of -1:
    "hadamard"  H⊗n · (2|0⟩⟨0| - I) · H⊗n
    "mcz"       H⊗n · X⊗n · CZ · X⊗n · H⊗n

Bit ordering convention:
    register list is LSB-first: register[0] is bit 0 (least significant),
    register[n-1] is bit n-1 (most significant).
"""

import logging
import numpy as np
from typing import List, Optional, Sequence

from .core import AmplitudeVector, applyGate, applyPhaseFlipUnlessZero
from .errors import InvalidArgument
from .gates import CZ, H, X, Circuit, on_each
from .measurement import sample
from .oracles import PhaseOracle, create_single_target_oracle
from .utils import optimal_iterations

logger = logging.getLogger(__name__)


def reflect_about_mean(vector: AmplitudeVector, register: Sequence[int]):
    """
    Grover diffusion operator (inversion about average).

    D = 2|ψ⟩⟨ψ| - I where |ψ⟩ is the uniform superposition, implemented as
    H⊗n · (2|0⟩⟨0| - I) · H⊗n.
    """
    hadamards = on_each(H, register)
    applyGate(vector, hadamards)
    applyPhaseFlipUnlessZero(vector, register)
    applyGate(vector, hadamards)


def reflection_mcz_circuit(register: Sequence[int]) -> Circuit:
    """
    Diffusion operator as a gate circuit.

    X on every qubit maps |0...0⟩ to |1...1⟩, where a multi-controlled Z
    (last qubit as target, the rest as controls) negates it. The result is
    I - 2|ψ⟩⟨ψ|, the negative of reflect_about_mean.
    """
    register = list(register)
    if not register:
        raise InvalidArgument("register must contain at least one qubit")
    flip_all = on_each(X, register)
    zero_phase = Circuit([flip_all, CZ(register[:-1], register[-1]), flip_all.adjoint()])
    hadamards = on_each(H, register)
    return Circuit([hadamards, zero_phase, hadamards.adjoint()])


def reflect_about_mean_mcz(vector: AmplitudeVector, register: Sequence[int]):
    """Diffusion operator via the X / controlled-Z / X identity."""
    applyGate(vector, reflection_mcz_circuit(register))


REFLECTIONS = {
    "hadamard": reflect_about_mean,
    "mcz": reflect_about_mean_mcz,
}


def grover_iteration(vector: AmplitudeVector, oracle: PhaseOracle,
                     register: Sequence[int], reflection: str = "hadamard"):
    """One Grover iteration: the phase oracle followed by the diffusion operator."""
    if reflection not in REFLECTIONS:
        raise InvalidArgument(f"reflection must be one of {sorted(REFLECTIONS)}, got {reflection!r}")
    oracle(vector, register)
    REFLECTIONS[reflection](vector, register)


class GroverSession:
    """
    One amplitude amplification run over a register.

    The session works on the caller's vector in place; it owns no other
    quantum state. The iteration count is taken as given (see
    utils.optimal_iterations for the usual choice).

    Args:
        vector: Register to run on, normally fresh from AmplitudeVector(n)
        oracle: Phase oracle (vector, register) -> None
        iterations: Number of Grover iterations, >= 0
        register: Qubits to search over (default: all qubits of vector)
        reflection: "hadamard" or "mcz"

    Raises:
        InvalidArgument: For a negative or non-integer iteration count, an
            unknown reflection or a non-callable oracle
        IndexOutOfRange: If the register names qubits the vector lacks
    """

    def __init__(self, vector: AmplitudeVector, oracle: PhaseOracle, iterations: int,
                 register: Optional[Sequence[int]] = None, reflection: str = "hadamard"):
        if not isinstance(vector, AmplitudeVector):
            raise InvalidArgument(f"expected an AmplitudeVector, got {vector!r}")
        if not callable(oracle):
            raise InvalidArgument(f"oracle must be callable, got {oracle!r}")
        if isinstance(iterations, bool) or not isinstance(iterations, (int, np.integer)):
            raise InvalidArgument(f"iterations must be an integer, got {iterations!r}")
        if iterations < 0:
            raise InvalidArgument(f"iterations must be >= 0, got {iterations}")
        if reflection not in REFLECTIONS:
            raise InvalidArgument(f"reflection must be one of {sorted(REFLECTIONS)}, got {reflection!r}")

        if register is None:
            register = range(vector.num_qubits)
        register = list(register)
        if not register:
            raise InvalidArgument("register must contain at least one qubit")
        if len(register) != len(set(register)):
            raise InvalidArgument(f"register lists a qubit twice: {register}")
        vector._check_qubits(register)

        self.vector = vector
        self.oracle = oracle
        self.iterations = int(iterations)
        self.register: List[int] = register
        self.reflection = reflection
        self.iterations_done = 0

    @property
    def num_qubits(self) -> int:
        return len(self.register)

    def prepare(self):
        """Apply the Hadamard transform to every register qubit."""
        applyGate(self.vector, on_each(H, self.register))

    def step(self):
        """Run a single Grover iteration."""
        grover_iteration(self.vector, self.oracle, self.register, self.reflection)
        self.iterations_done += 1

    def run(self, verbose: bool = False) -> "GroverSession":
        """Prepare the superposition and run all iterations."""
        logger.debug("grover run: %d qubits, %d iterations, %s reflection",
                     self.num_qubits, self.iterations, self.reflection)
        self.prepare()
        if verbose:
            print("Initial uniform superposition created")

        for iteration in range(self.iterations):
            self.step()
            if verbose:
                print(f"Iteration {iteration + 1}: amplification in progress")

        logger.debug("grover run finished after %d iterations", self.iterations_done)
        return self


def grover_search(
    n: int,
    oracle: PhaseOracle,
    num_iterations: Optional[int] = None,
    verbose: bool = True,
    rng: Optional[np.random.Generator] = None,
) -> int:
    """
    Run Grover's search algorithm and measure the result.

    Args:
        n: Number of qubits (searches 2^n items). Must be >= 1.
        oracle: Phase oracle (vector, register) -> None
        num_iterations: Number of Grover iterations (default: optimal ~π/4·√(N/M),
            with M the number of oracle targets when the oracle lists them)
        verbose: If True, print progress
        rng: Random generator used for the measurement

    Returns:
        Measured result as integer (0 to 2^n - 1)
    """
    vector = AmplitudeVector(n)

    N = 2 ** n
    if num_iterations is None:
        num_iterations = optimal_iterations(N, len(getattr(oracle, "targets", (None,))))

    if verbose:
        print(f"Grover search on {n} qubits ({N} items)")
        print(f"Using {num_iterations} iterations")

    GroverSession(vector, oracle, num_iterations).run(verbose=verbose)

    if verbose:
        print("Measuring result...")

    result = sample(vector, rng)

    if verbose:
        print(f"Measured: {result}")

    return result


def grover_search_for_value(n: int, target: int, verbose: bool = True,
                            rng: Optional[np.random.Generator] = None) -> int:
    """
    Convenience function to search for a specific value.

    Args:
        n: Number of qubits. Must be >= 1.
        target: Value to search for (0 to 2^n - 1)
        verbose: If True, print progress
        rng: Random generator used for the measurement

    Returns:
        Measured result (should equal target with high probability)
    """
    oracle = create_single_target_oracle(target, n)
    return grover_search(n, oracle, verbose=verbose, rng=rng)
