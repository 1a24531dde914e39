# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Advanced Micro Devices, Inc. All rights reserved.

"""
Compute backend contract for offloaded GEMM

A backend owns a device, hands out execution contexts and shared buffers,
and runs C = alpha * op(A) * op(B) + beta * C on column-major data.
Base class validates and orchestrates, derived class implements.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional

import numpy as np

from ..exceptions import AsyncBackendFault, BackendFault, BackendStatus
from ..logger import logger

FaultHandler = Callable[[List[AsyncBackendFault]], None]


class Transpose(Enum):
	"""Operand transform applied before the multiply."""

	NONTRANS = "N"
	TRANS = "T"


@dataclass(frozen=True)
class DeviceInfo:
	"""Identification of the device a backend runs on"""

	backend: str
	name: str
	kind: str  # "cpu" or "gpu"


@dataclass(frozen=True)
class GemmStatus:
	"""Outcome of one multiply call: completed, or a tagged fault"""

	completed: bool
	code: int = BackendStatus.SUCCESS
	message: str = ""

	@classmethod
	def ok(cls) -> "GemmStatus":
		return cls(completed=True)

	@classmethod
	def fault(cls, code: int, message: str) -> "GemmStatus":
		return cls(completed=False, code=int(code), message=message)


class ExecutionContext:
	"""
	Queue-like handle bound to one backend device

	The fault handler lives only as long as this context. Asynchronous
	faults are queued and delivered to it by wait_and_throw().
	"""

	def __init__(self, backend: "ComputeBackend", fault_handler: Optional[FaultHandler] = None):
		self.backend = backend
		self.device = backend.device_info
		self.fault_handler = fault_handler
		self._pending: List[AsyncBackendFault] = []

	def report_async_fault(self, fault: AsyncBackendFault):
		logger.debug(f"Queued asynchronous fault: {fault}")
		self._pending.append(fault)

	@property
	def pending_faults(self) -> List[AsyncBackendFault]:
		return list(self._pending)

	def synchronize(self):
		"""Block until submitted work finishes; device errors become async faults."""
		try:
			self.backend._synchronize()
		except BackendFault as e:
			self.report_async_fault(AsyncBackendFault(e.message, e.code))

	def wait_and_throw(self):
		"""Synchronize, then hand any queued faults to the fault handler."""
		self.synchronize()
		if not self._pending:
			return

		faults, self._pending = self._pending, []
		if self.fault_handler is None:
			raise faults[0]
		self.fault_handler(faults)


class SharedBuffer:
	"""
	Scoped binding of a host array to backend storage

	Entering the scope copies the host data to the backend. Leaving it waits
	for the backend and, for writable buffers, copies the storage back into
	the host array. Release runs on every exit path.
	"""

	def __init__(self, context: ExecutionContext, host: np.ndarray, writable: bool = False):
		if host.ndim != 1:
			raise ValueError(f"shared buffers wrap 1-D host arrays, got shape {host.shape}")
		self.context = context
		self.host = host
		self.writable = writable
		self._storage = None

	def __enter__(self) -> "SharedBuffer":
		self._storage = self.context.backend._to_device(self.host)
		return self

	def __exit__(self, exc_type, exc, tb):
		self.release()
		return False

	@property
	def acquired(self) -> bool:
		return self._storage is not None

	@property
	def storage(self) -> Any:
		if self._storage is None:
			raise RuntimeError("shared buffer accessed outside its scope")
		return self._storage

	def __len__(self) -> int:
		return self.host.size

	def release(self):
		if self._storage is None:
			return
		try:
			self.context.synchronize()
			if self.writable:
				self.context.backend._to_host(self._storage, self.host)
		finally:
			self._storage = None


def _required_length(ld: int, rows: int, cols: int) -> int:
	if rows == 0 or cols == 0:
		return 0
	return ld * (cols - 1) + rows


class ComputeBackend(ABC):
	"""
	Base class for GEMM offload backends

	Subclasses provide device discovery, host/device transfers and the
	multiply itself (_gemm). Argument checking and fault tagging live here.
	"""

	name = "base"

	def __init__(self):
		self.device_info = self._get_device_info()

	@abstractmethod
	def _get_device_info(self) -> DeviceInfo:
		"""Return the device this backend runs on"""
		pass

	@abstractmethod
	def _to_device(self, host: np.ndarray) -> Any:
		"""Copy a host buffer into backend storage"""
		pass

	@abstractmethod
	def _to_host(self, storage: Any, host: np.ndarray):
		"""Copy backend storage back into the host buffer"""
		pass

	def _synchronize(self):
		"""Wait for outstanding work; raise BackendFault on device errors"""
		pass

	@abstractmethod
	def _gemm(
		self,
		trans_a: Transpose,
		trans_b: Transpose,
		m: int,
		n: int,
		k: int,
		alpha: float,
		a: Any,
		lda: int,
		b: Any,
		ldb: int,
		beta: float,
		c: Any,
		ldc: int,
		context: ExecutionContext,
	):
		"""Run the multiply on backend storage; raise BackendFault on failure"""
		pass

	def create_context(self, fault_handler: Optional[FaultHandler] = None) -> ExecutionContext:
		return ExecutionContext(self, fault_handler)

	def shared_buffer(self, context: ExecutionContext, host: np.ndarray, writable: bool = False) -> SharedBuffer:
		return SharedBuffer(context, host, writable=writable)

	def multiply(
		self,
		context: ExecutionContext,
		trans_a: Transpose,
		trans_b: Transpose,
		m: int,
		n: int,
		k: int,
		alpha: float,
		a: SharedBuffer,
		lda: int,
		b: SharedBuffer,
		ldb: int,
		beta: float,
		c: SharedBuffer,
		ldc: int,
	) -> GemmStatus:
		"""
		C = alpha * op(A) * op(B) + beta * C on column-major buffers

		op(A) is m x k, op(B) is k x n, C is m x n.

		Returns:
			GemmStatus.ok() or a fault carrying the backend status code
		"""
		try:
			self._check_arguments(context, trans_a, trans_b, m, n, k, a, lda, b, ldb, c, ldc)
			logger.debug(
				f"{self.name}: gemm {trans_a.value}{trans_b.value} m={m} n={n} k={k} "
				f"lda={lda} ldb={ldb} ldc={ldc} alpha={alpha} beta={beta}"
			)
			self._gemm(
				trans_a, trans_b, m, n, k,
				alpha, a.storage, lda,
				b.storage, ldb,
				beta, c.storage, ldc,
				context,
			)
		except BackendFault as e:
			logger.debug(f"{self.name}: gemm faulted with status {e.code}: {e.message}")
			return GemmStatus.fault(e.code, e.message)

		return GemmStatus.ok()

	def _check_arguments(self, context, trans_a, trans_b, m, n, k, a, lda, b, ldb, c, ldc):
		if context.backend is not self:
			raise BackendFault("execution context belongs to another backend", BackendStatus.INVALID_DEVICE)
		if not isinstance(trans_a, Transpose) or not isinstance(trans_b, Transpose):
			raise BackendFault("transpose flags must be Transpose values", BackendStatus.INVALID_VALUE)
		if m < 0 or n < 0 or k < 0:
			raise BackendFault(f"negative problem size m={m} n={n} k={k}", BackendStatus.INVALID_VALUE)

		# Stored shapes of A and B depend on the transpose flags
		a_rows, a_cols = (m, k) if trans_a is Transpose.NONTRANS else (k, m)
		b_rows, b_cols = (k, n) if trans_b is Transpose.NONTRANS else (n, k)

		for label, buf, ld, rows, cols in (
			("A", a, lda, a_rows, a_cols),
			("B", b, ldb, b_rows, b_cols),
			("C", c, ldc, m, n),
		):
			if ld < max(1, rows):
				raise BackendFault(
					f"ld{label}={ld} is smaller than the {rows} stored rows of {label}",
					BackendStatus.INVALID_VALUE,
				)
			if not buf.acquired:
				raise BackendFault(f"buffer {label} is not bound to a scope", BackendStatus.INVALID_OPERATION)
			if len(buf) < _required_length(ld, rows, cols):
				raise BackendFault(
					f"buffer {label} holds {len(buf)} elements, "
					f"{_required_length(ld, rows, cols)} required",
					BackendStatus.INVALID_VALUE,
				)

		if not c.writable:
			raise BackendFault("output buffer C is read-only", BackendStatus.INVALID_OPERATION)
