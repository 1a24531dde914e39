# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Advanced Micro Devices, Inc. All rights reserved.

"""Shared fixtures: backends that misbehave on purpose."""

import pytest

from gemmcheck.backends import NumpyBackend
from gemmcheck.exceptions import AsyncBackendFault, BackendFault, BackendStatus


class CorruptingBackend(NumpyBackend):
	"""Correct GEMM, then one element of C bumped by +1.0."""

	name = "corrupting"

	def __init__(self, row: int, col: int, delta: float = 1.0):
		self.row = row
		self.col = col
		self.delta = delta
		super().__init__()

	def _gemm(self, trans_a, trans_b, m, n, k, alpha, a, lda, b, ldb, beta, c, ldc, context):
		super()._gemm(trans_a, trans_b, m, n, k, alpha, a, lda, b, ldb, beta, c, ldc, context)
		c[self.row + self.col * ldc] += self.delta


class FaultingBackend(NumpyBackend):
	"""Fails every GEMM synchronously without touching C."""

	name = "faulting"

	def __init__(self, code: int = BackendStatus.INVALID_OPERATION, message: str = "device lost"):
		self.code = code
		self.message = message
		self.calls = 0
		super().__init__()

	def _gemm(self, trans_a, trans_b, m, n, k, alpha, a, lda, b, ldb, beta, c, ldc, context):
		self.calls += 1
		raise BackendFault(self.message, self.code)


class AsyncFaultingBackend(NumpyBackend):
	"""Completes the GEMM but reports a fault on the asynchronous channel."""

	name = "async-faulting"

	def _gemm(self, trans_a, trans_b, m, n, k, alpha, a, lda, b, ldb, beta, c, ldc, context):
		super()._gemm(trans_a, trans_b, m, n, k, alpha, a, lda, b, ldb, beta, c, ldc, context)
		context.report_async_fault(AsyncBackendFault("kernel watchdog expired", BackendStatus.OUT_OF_RESOURCES))


class RecordingHandler:
	"""Fault handler that keeps what it receives instead of aborting."""

	def __init__(self):
		self.faults = []

	def __call__(self, faults):
		self.faults.extend(faults)


@pytest.fixture
def numpy_backend():
	return NumpyBackend()


@pytest.fixture
def recording_handler():
	return RecordingHandler()


class LostDeviceBackend(NumpyBackend):
	"""Device dies after submission: every barrier and every copy back fails."""

	name = "lost-device"

	def _synchronize(self):
		raise BackendFault("device error: illegal address", BackendStatus.INVALID_OPERATION)

	def _to_host(self, storage, host):
		raise BackendFault("copy back failed", BackendStatus.INVALID_OPERATION)
