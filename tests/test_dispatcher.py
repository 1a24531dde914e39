"""
Unit tests for the offload dispatcher
"""

import numpy as np
import pytest

from conftest import AsyncFaultingBackend, FaultingBackend, LostDeviceBackend
from gemmcheck.dispatcher import OffloadDispatcher, terminate_on_fault
from gemmcheck.exceptions import AsyncBackendFault, BackendStatus
from gemmcheck.matrix import Matrix, generate_inputs
from gemmcheck.reference import closed_form_product


class TestDispatch:
	"""Offload of the generated problem"""

	def test_completed_dispatch_fills_c(self, numpy_backend, capsys):
		a, b, c = generate_inputs(8, 16, 32)

		outcome = OffloadDispatcher(numpy_backend).dispatch(a, b, c)

		assert outcome.completed
		assert outcome.device.backend == "numpy"
		assert np.all(c.data == closed_form_product(16))
		assert capsys.readouterr().out.startswith("Device: ")

	def test_inputs_untouched(self, numpy_backend):
		a, b, c = generate_inputs(8, 16, 32)
		a0, b0 = a.data.copy(), b.data.copy()
		OffloadDispatcher(numpy_backend).dispatch(a, b, c)
		assert np.array_equal(a.data, a0)
		assert np.array_equal(b.data, b0)

	def test_multiply_arguments(self, numpy_backend, monkeypatch):
		"""No transposes, m=M, n=P, k=N, ldA=M, ldB=N, ldC=M, alpha=1, beta=0"""
		calls = []
		original = numpy_backend.multiply

		def spy(context, trans_a, trans_b, m, n, k, alpha, a, lda, b, ldb, beta, c, ldc):
			calls.append((trans_a.value, trans_b.value, m, n, k, alpha, lda, ldb, beta, ldc))
			return original(context, trans_a, trans_b, m, n, k, alpha, a, lda, b, ldb, beta, c, ldc)

		monkeypatch.setattr(numpy_backend, "multiply", spy)
		a, b, c = generate_inputs(75, 150, 300)
		OffloadDispatcher(numpy_backend).dispatch(a, b, c)

		assert calls == [("N", "N", 75, 300, 150, 1.0, 75, 150, 0.0, 75)]

	def test_shape_mismatch_rejected(self, numpy_backend):
		a, b = Matrix.empty(2, 3), Matrix.empty(4, 2)
		with pytest.raises(ValueError):
			OffloadDispatcher(numpy_backend).dispatch(a, b, Matrix.empty(2, 2))


class TestSynchronousFault:
	"""A caught backend fault is reported and returned"""

	def test_fault_is_reported_not_raised(self, capsys):
		backend = FaultingBackend(code=BackendStatus.INVALID_OPERATION, message="device lost")
		a, b, c = generate_inputs(8, 16, 32)

		outcome = OffloadDispatcher(backend).dispatch(a, b, c)

		assert not outcome.completed
		assert outcome.status.code == BackendStatus.INVALID_OPERATION
		assert backend.calls == 1
		err = capsys.readouterr().err
		assert "Backend exception during GEMM" in err
		assert "device lost" in err
		assert f"Backend status: {int(BackendStatus.INVALID_OPERATION)}" in err


class TestAsynchronousFault:
	"""Faults after submission reach the fault handler"""

	def test_custom_handler_receives_fault(self, recording_handler):
		a, b, c = generate_inputs(8, 16, 32)

		OffloadDispatcher(AsyncFaultingBackend(), fault_handler=recording_handler).dispatch(a, b, c)

		assert len(recording_handler.faults) == 1
		assert recording_handler.faults[0].code == BackendStatus.OUT_OF_RESOURCES

	def test_default_handler_aborts(self, monkeypatch, capsys):
		class Aborted(Exception):
			pass

		def fake_abort():
			raise Aborted()

		monkeypatch.setattr("gemmcheck.dispatcher.os.abort", fake_abort)
		a, b, c = generate_inputs(8, 16, 32)

		with pytest.raises(Aborted):
			OffloadDispatcher(AsyncFaultingBackend()).dispatch(a, b, c)

		out = capsys.readouterr().out
		assert "kernel watchdog expired" in out
		assert out.rstrip().endswith("fail")

	def test_terminate_on_fault_prints_each_fault(self, monkeypatch, capsys):
		monkeypatch.setattr("gemmcheck.dispatcher.os.abort", lambda: None)
		terminate_on_fault([AsyncBackendFault("first"), AsyncBackendFault("second")])
		assert capsys.readouterr().out.splitlines() == ["first", "second", "fail"]

	def test_barrier_fault_delivered_when_copy_back_fails(self, recording_handler):
		"""A failed copy back must not hide the fault queued at the barrier"""
		a, b, c = generate_inputs(8, 16, 32)

		outcome = OffloadDispatcher(LostDeviceBackend(), fault_handler=recording_handler).dispatch(a, b, c)

		assert recording_handler.faults
		assert all(isinstance(fault, AsyncBackendFault) for fault in recording_handler.faults)
		assert recording_handler.faults[0].message == "device error: illegal address"
		assert not outcome.completed
		assert outcome.status.message == "copy back failed"

	def test_barrier_fault_with_default_handler_aborts(self, monkeypatch, capsys):
		class Aborted(Exception):
			pass

		def fake_abort():
			raise Aborted()

		monkeypatch.setattr("gemmcheck.dispatcher.os.abort", fake_abort)
		a, b, c = generate_inputs(8, 16, 32)

		with pytest.raises(Aborted):
			OffloadDispatcher(LostDeviceBackend()).dispatch(a, b, c)

		out = capsys.readouterr().out
		assert "device error: illegal address" in out
		assert out.rstrip().endswith("fail")
