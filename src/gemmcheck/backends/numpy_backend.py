# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Advanced Micro Devices, Inc. All rights reserved.

"""
Host backend: GEMM through numpy's linked BLAS
"""

import platform

import numpy as np
from numpy.lib.stride_tricks import as_strided

from ..exceptions import BackendFault, BackendStatus
from .base import ComputeBackend, DeviceInfo, Transpose


def _column_major_view(storage: np.ndarray, ld: int, rows: int, cols: int) -> np.ndarray:
	"""(rows, cols) view of a 1-D buffer whose columns are ld elements apart"""
	itemsize = storage.itemsize
	return as_strided(storage, shape=(rows, cols), strides=(itemsize, ld * itemsize))


class NumpyBackend(ComputeBackend):
	"""Runs the multiply on the host with numpy.matmul"""

	name = "numpy"

	def _get_device_info(self) -> DeviceInfo:
		cpu = platform.processor() or platform.machine() or "host CPU"
		return DeviceInfo(backend=self.name, name=f"{cpu} (numpy {np.__version__})", kind="cpu")

	def _to_device(self, host: np.ndarray) -> np.ndarray:
		return np.array(host, dtype=np.float64, copy=True)

	def _to_host(self, storage: np.ndarray, host: np.ndarray):
		np.copyto(host, storage)

	def _gemm(self, trans_a, trans_b, m, n, k, alpha, a, lda, b, ldb, beta, c, ldc, context):
		if m == 0 or n == 0:
			return

		a_rows, a_cols = (m, k) if trans_a is Transpose.NONTRANS else (k, m)
		b_rows, b_cols = (k, n) if trans_b is Transpose.NONTRANS else (n, k)

		op_a = _column_major_view(a, lda, a_rows, a_cols)
		op_b = _column_major_view(b, ldb, b_rows, b_cols)
		if trans_a is Transpose.TRANS:
			op_a = op_a.T
		if trans_b is Transpose.TRANS:
			op_b = op_b.T
		c_view = _column_major_view(c, ldc, m, n)

		try:
			product = np.matmul(op_a, op_b)
		except ValueError as e:
			raise BackendFault(f"host GEMM failed: {e}", BackendStatus.INVALID_VALUE)
		except MemoryError as e:
			raise BackendFault(f"host GEMM ran out of memory: {e}", BackendStatus.OUT_OF_RESOURCES)

		if alpha != 1.0:
			product *= alpha
		# beta == 0 means C is write-only; its prior contents may be garbage
		if beta == 0.0:
			c_view[...] = product
		else:
			c_view[...] = product + beta * c_view
