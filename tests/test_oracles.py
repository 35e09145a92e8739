"""Tests for marking oracles and the phase oracle converter."""

import numpy as np
import pytest

from qsearch import (
    AmplitudeVector, applyGate, on_each, H,
    mark_all_ones, mark_alternating_bits, mark_arbitrary_pattern,
    alternating_bits_circuit, pattern_marker, convert_to_phase_oracle,
    create_single_target_oracle, create_multi_target_oracle,
    InvalidArgument, IndexOutOfRange,
    allclose_up_to_global_phase,
)


def basis_state(index, n):
    amplitudes = np.zeros(2 ** n)
    amplitudes[index] = 1
    return AmplitudeVector.from_amplitudes(amplitudes)


def uniform(n):
    v = AmplitudeVector(n)
    applyGate(v, on_each(H, range(n)))
    return v


def flipped_states(oracle, n):
    """Basis states whose amplitude the phase oracle negates."""
    flipped = []
    for index in range(2 ** n):
        v = basis_state(index, n)
        oracle(v, list(range(n)))
        state = v.get_state()
        assert v.num_qubits == n
        if np.allclose(state, -np.eye(2 ** n)[index]):
            flipped.append(index)
        else:
            assert np.allclose(state, np.eye(2 ** n)[index])
    return flipped


class TestMarkingOracles:
    """Marking oracles flip a target qubit."""

    def test_mark_all_ones(self):
        for index in range(8):
            v = basis_state(index, 4)
            mark_all_ones(v, [0, 1, 2], 3)
            expected = index | 8 if index == 7 else index
            assert np.allclose(v.get_state(), np.eye(16)[expected])

    def test_mark_alternating_bits(self):
        """Even positions 1, odd positions 0: pattern 1010 over [0, 1, 2, 3] is index 5."""
        for index in range(16):
            v = basis_state(index, 5)
            mark_alternating_bits(v, [0, 1, 2, 3], 4)
            expected = index | 16 if index == 5 else index
            assert np.allclose(v.get_state(), np.eye(32)[expected])

    def test_alternating_bits_restores_controls(self):
        """The odd-position flips are undone, so the controls come back unchanged."""
        rng = np.random.default_rng(3)
        amplitudes = rng.normal(size=8) + 1j * rng.normal(size=8)
        amplitudes /= np.linalg.norm(amplitudes)
        v = AmplitudeVector.from_amplitudes(np.concatenate([amplitudes, np.zeros(8)]))
        mark_alternating_bits(v, [0, 1, 2], 3)
        state = v.get_state()
        marked = 0b101
        for index in range(8):
            if index == marked:
                assert np.isclose(state[index + 8], amplitudes[index])
                assert np.isclose(state[index], 0)
            else:
                assert np.isclose(state[index], amplitudes[index])

    def test_alternating_bits_circuit_is_its_own_adjoint(self):
        circuit = alternating_bits_circuit([0, 1, 2, 3], 4)
        assert list(circuit.adjoint().flatten()) == list(circuit.flatten())

    def test_mark_arbitrary_pattern(self):
        for index in range(8):
            v = basis_state(index, 4)
            mark_arbitrary_pattern(v, [0, 1, 2], 3, "011")
            expected = index | 8 if index == 6 else index
            assert np.allclose(v.get_state(), np.eye(16)[expected])

    def test_mark_arbitrary_pattern_length_mismatch(self):
        v = AmplitudeVector(4)
        with pytest.raises(InvalidArgument):
            mark_arbitrary_pattern(v, [0, 1, 2], 3, "01")


class TestPhaseOracle:
    """Phase kickback through a scratch qubit."""

    def test_all_ones_phase_oracle(self):
        oracle = convert_to_phase_oracle(mark_all_ones)
        assert flipped_states(oracle, 3) == [7]

    def test_alternating_bits_phase_oracle(self):
        oracle = convert_to_phase_oracle(mark_alternating_bits)
        assert flipped_states(oracle, 4) == [5]

    def test_pattern_phase_oracle(self):
        oracle = convert_to_phase_oracle(pattern_marker("101"))
        assert flipped_states(oracle, 3) == [5]

    def test_phase_oracle_on_superposition(self):
        v = uniform(3)
        convert_to_phase_oracle(mark_all_ones)(v, [0, 1, 2])
        expected = np.ones(8) / np.sqrt(8)
        expected[7] *= -1
        assert np.allclose(v.get_state(), expected)
        assert v.num_qubits == 3

    def test_phase_oracle_twice_is_identity(self):
        oracle = convert_to_phase_oracle(mark_all_ones)
        v = uniform(3)
        before = v.get_state()
        oracle(v, [0, 1, 2])
        oracle(v, [0, 1, 2])
        assert np.allclose(v.get_state(), before)

    def test_phase_oracle_on_register_subset(self):
        """Qubits outside the register are treated as bystanders."""
        oracle = convert_to_phase_oracle(mark_all_ones)
        v = basis_state(0b1011, 4)
        oracle(v, [0, 1])
        assert np.allclose(v.get_state(), -np.eye(16)[0b1011])

    def test_scratch_released_when_marking_oracle_fails(self):
        def broken(vector, controls, target):
            mark_all_ones(vector, controls, target)
            raise RuntimeError("predicate failed")

        oracle = convert_to_phase_oracle(broken)
        v = uniform(2)
        with pytest.raises(RuntimeError):
            oracle(v, [0, 1])
        assert v.num_qubits == 2
        assert v.is_normalized()

    def test_scratch_released_on_bad_register(self):
        oracle = convert_to_phase_oracle(mark_all_ones)
        v = uniform(2)
        before = v.get_state()
        with pytest.raises(IndexOutOfRange):
            oracle(v, [0, 7])
        assert v.num_qubits == 2
        assert allclose_up_to_global_phase(v.get_state(), before)

    def test_non_callable_rejected(self):
        with pytest.raises(InvalidArgument):
            convert_to_phase_oracle("oracle")


class TestTargetOracles:
    """Oracles that mark integer values."""

    def test_single_target(self):
        oracle = create_single_target_oracle(6, 3)
        assert flipped_states(oracle, 3) == [6]

    def test_multi_target(self):
        oracle = create_multi_target_oracle([12, 3, 3], 4)
        assert oracle.targets == (3, 12)
        assert flipped_states(oracle, 4) == [3, 12]

    @pytest.mark.parametrize("target", [-1, 8])
    def test_target_out_of_range(self, target):
        with pytest.raises(InvalidArgument):
            create_single_target_oracle(target, 3)

    def test_invalid_arguments(self):
        with pytest.raises(InvalidArgument):
            create_single_target_oracle(0, 0)
        with pytest.raises(InvalidArgument):
            create_multi_target_oracle([], 3)

    def test_register_size_mismatch(self):
        oracle = create_single_target_oracle(1, 3)
        v = AmplitudeVector(4)
        with pytest.raises(InvalidArgument):
            oracle(v, [0, 1])
        assert v.num_qubits == 4

    @pytest.mark.parametrize("target", [2.5, True, "3"])
    def test_non_integer_target(self, target):
        with pytest.raises(InvalidArgument):
            create_single_target_oracle(target, 3)

    @pytest.mark.parametrize("n", [3.0, True])
    def test_non_integer_size(self, n):
        with pytest.raises(InvalidArgument):
            create_multi_target_oracle([1], n)

    def test_numpy_integer_targets(self):
        oracle = create_multi_target_oracle(np.array([2, 5]), 3)
        assert oracle.targets == (2, 5)
        assert flipped_states(oracle, 3) == [2, 5]
