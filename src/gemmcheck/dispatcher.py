# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Advanced Micro Devices, Inc. All rights reserved.

"""Offload of the GEMM to a compute backend."""

import os
import sys
from contextlib import ExitStack
from typing import List, Optional

from .backends.base import ComputeBackend, FaultHandler, GemmStatus, Transpose
from .exceptions import AsyncBackendFault, BackendFault
from .logger import logger
from .matrix import Matrix
from .result import DispatchResult


def terminate_on_fault(faults: List[AsyncBackendFault]):
	"""Default asynchronous fault handler.

	A context that faulted after submission cannot be trusted to have
	produced defined output, so the process ends abnormally.
	"""
	for fault in faults:
		logger.error(f"Asynchronous backend fault: {fault}")
		print(fault.message)
	print("fail")
	sys.stdout.flush()
	os.abort()


class OffloadDispatcher:
	"""Runs C = alpha * A * B + beta * C on a compute backend.

	Example:
		>>> dispatcher = OffloadDispatcher(get_backend("numpy"))
		>>> outcome = dispatcher.dispatch(a, b, c)
		>>> outcome.completed
		True
	"""

	def __init__(self, backend: ComputeBackend, fault_handler: Optional[FaultHandler] = None):
		self.backend = backend
		self.fault_handler = fault_handler if fault_handler is not None else terminate_on_fault

	def dispatch(self, a: Matrix, b: Matrix, c: Matrix, alpha: float = 1.0, beta: float = 0.0) -> DispatchResult:
		"""Multiply A (M x N) by B (N x P) into C (M x P) on the backend.

		C's host buffer is updated when the shared buffers are released, on
		every exit path. A synchronous backend fault is reported and returned
		in the result rather than raised, so verification still runs on
		whatever C then holds.

		Args:
			a: Left operand, M x N
			b: Right operand, N x P
			c: Output, M x P; overwritten
			alpha: Scale of A * B
			beta: Scale of C's prior contents

		Returns:
			DispatchResult with the device and the backend status
		"""
		if a.cols != b.rows or c.rows != a.rows or c.cols != b.cols:
			raise ValueError(f"incompatible shapes: {a!r} * {b!r} -> {c!r}")

		m, n, k = c.rows, c.cols, a.cols
		context = None
		try:
			context = self.backend.create_context(self.fault_handler)
			print(f"Device: {context.device.name}")
			logger.info(f"Dispatching gemm to {self.backend.name} backend")

			with ExitStack() as scope:
				a_buf = scope.enter_context(self.backend.shared_buffer(context, a.data))
				b_buf = scope.enter_context(self.backend.shared_buffer(context, b.data))
				c_buf = scope.enter_context(self.backend.shared_buffer(context, c.data, writable=True))

				status = self.backend.multiply(
					context,
					Transpose.NONTRANS,
					Transpose.NONTRANS,
					m, n, k,
					alpha, a_buf, a.ld,
					b_buf, b.ld,
					beta, c_buf, c.ld,
				)
		except BackendFault as e:
			status = GemmStatus.fault(e.code, e.message)

		# Buffers are released on every path; asynchronous faults queued while
		# releasing them reach the handler even when a copy back also failed
		if context is not None:
			context.wait_and_throw()

		if not status.completed:
			print("\t\tBackend exception during GEMM", file=sys.stderr)
			print(status.message, file=sys.stderr)
			print(f"Backend status: {status.code}", file=sys.stderr)
			logger.warning(f"gemm faulted with status {status.code}; verifying whatever C holds")

		return DispatchResult(device=self.backend.device_info, status=status)
