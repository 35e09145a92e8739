"""Tests for the amplitude vector, scratch qubits and the qubit limit."""

import logging

import numpy as np
import pytest

from qsearch import (
    AmplitudeVector, applyX, applyH, applyGate, scratch_qubit, on_each, H,
    DEFAULT_MAX_QUBITS, get_max_qubits, set_max_qubits, max_qubits, state_memory_bytes,
    InvalidDimension, InvalidArgument, IndexOutOfRange,
)
from qsearch.config import ENV_MAX_QUBITS


@pytest.fixture(autouse=True)
def clean_limit(monkeypatch):
    monkeypatch.delenv(ENV_MAX_QUBITS, raising=False)
    set_max_qubits(None)
    yield
    set_max_qubits(None)


class TestAmplitudeVector:
    """Tests for register creation and inspection."""

    def test_initialize_is_zero_state(self):
        v = AmplitudeVector.initialize(3)
        assert v.num_qubits == 3
        assert v.dimension == 8
        assert np.allclose(v.get_state(), np.eye(8)[0])
        assert v.normSquared() == pytest.approx(1.0)

    @pytest.mark.parametrize("n", [0, -1])
    def test_non_positive_size_rejected(self, n):
        with pytest.raises(InvalidDimension):
            AmplitudeVector(n)

    def test_non_integer_size_rejected(self):
        with pytest.raises(InvalidDimension):
            AmplitudeVector(2.5)
        with pytest.raises(InvalidDimension):
            AmplitudeVector(True)

    def test_get_state_returns_copy(self):
        v = AmplitudeVector(1)
        state = v.get_state()
        state[0] = 0
        assert v.get_state()[0] == 1

    def test_copy_is_independent(self):
        v = AmplitudeVector(2)
        snapshot = v.copy()
        applyX(v, 0)
        assert np.allclose(snapshot.get_state(), np.eye(4)[0])
        assert np.allclose(v.get_state(), np.eye(4)[1])

    def test_from_amplitudes(self):
        v = AmplitudeVector.from_amplitudes([0, 0.6, 0, 0.8j])
        assert v.num_qubits == 2
        assert v.is_normalized()

    def test_from_amplitudes_rejects_unnormalized(self):
        with pytest.raises(InvalidArgument):
            AmplitudeVector.from_amplitudes([1, 1])

    def test_from_amplitudes_rejects_bad_length(self):
        with pytest.raises(InvalidDimension):
            AmplitudeVector.from_amplitudes([1, 0, 0])
        with pytest.raises(InvalidDimension):
            AmplitudeVector.from_amplitudes([1])


class TestQubitLimit:
    """Tests for the maximum register size."""

    def test_default_limit(self):
        assert get_max_qubits() == DEFAULT_MAX_QUBITS

    def test_limit_enforced(self):
        with max_qubits(4):
            AmplitudeVector(4)
            with pytest.raises(InvalidDimension):
                AmplitudeVector(5)
        assert get_max_qubits() == DEFAULT_MAX_QUBITS

    def test_far_beyond_limit_fails_fast(self):
        with pytest.raises(InvalidDimension):
            AmplitudeVector(200)

    def test_environment_variable(self, monkeypatch):
        monkeypatch.setenv(ENV_MAX_QUBITS, "6")
        assert get_max_qubits() == 6
        with pytest.raises(InvalidDimension):
            AmplitudeVector(7)

    def test_override_beats_environment(self, monkeypatch):
        monkeypatch.setenv(ENV_MAX_QUBITS, "6")
        set_max_qubits(10)
        assert get_max_qubits() == 10

    def test_bad_environment_value(self, monkeypatch):
        monkeypatch.setenv(ENV_MAX_QUBITS, "lots")
        with pytest.raises(InvalidArgument):
            get_max_qubits()

    def test_bad_limit(self):
        with pytest.raises(InvalidArgument):
            set_max_qubits(0)

    def test_state_memory_bytes(self):
        assert state_memory_bytes(10) == 16 * 1024


class TestScratchQubit:
    """Tests for the scoped scratch qubit."""

    def test_allocates_and_releases(self):
        v = AmplitudeVector(2)
        applyH(v, 0)
        before = v.get_state()
        with scratch_qubit(v) as s:
            assert s == 2
            assert v.num_qubits == 3
            assert np.allclose(v.get_state()[:4], before)
            applyX(v, s)
            applyX(v, s)
        assert v.num_qubits == 2
        assert np.allclose(v.get_state(), before)

    def test_nested_scratch_qubits(self):
        v = AmplitudeVector(1)
        with scratch_qubit(v) as a:
            with scratch_qubit(v) as b:
                assert (a, b) == (1, 2)
                assert v.num_qubits == 3
            assert v.num_qubits == 2
        assert v.num_qubits == 1

    def test_released_when_body_raises(self):
        """The scratch qubit is removed even if the block fails half-way."""
        v = AmplitudeVector(2)
        applyGate(v, on_each(H, [0, 1]))
        before = v.get_state()
        with pytest.raises(RuntimeError):
            with scratch_qubit(v) as s:
                applyX(v, s)
                applyH(v, s)
                raise RuntimeError("oracle failed")
        assert v.num_qubits == 2
        assert v.is_normalized()
        assert np.allclose(v.get_state(), before)

    def test_excited_scratch_is_projected(self):
        v = AmplitudeVector(1)
        with scratch_qubit(v) as s:
            applyX(v, s)
        assert v.num_qubits == 1
        assert np.allclose(v.get_state(), [1, 0])

    def test_dirty_release_logs_warning(self, caplog):
        v = AmplitudeVector(1)
        with caplog.at_level(logging.WARNING, logger="qsearch.core"):
            with scratch_qubit(v) as s:
                applyH(v, s)
        assert "non-zero state" in caplog.text

    def test_scratch_respects_limit(self):
        v = AmplitudeVector(2)
        with max_qubits(2):
            with pytest.raises(InvalidDimension):
                with scratch_qubit(v):
                    pass
        assert v.num_qubits == 2

    def test_scratch_index_invalid_after_release(self):
        v = AmplitudeVector(1)
        with scratch_qubit(v) as s:
            pass
        with pytest.raises(IndexOutOfRange):
            applyX(v, s)
