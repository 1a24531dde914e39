# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Advanced Micro Devices, Inc. All rights reserved.

"""
Accelerator backend: GEMM through PyTorch on a CUDA/ROCm device (CPU fallback)
"""

from typing import Optional

import numpy as np
import torch

from ..exceptions import BackendFault, BackendStatus, BackendUnavailableError
from .base import ComputeBackend, DeviceInfo, Transpose


def default_device() -> torch.device:
	"""First visible accelerator, or the CPU when none is present"""
	if torch.cuda.is_available():
		return torch.device("cuda")
	return torch.device("cpu")


class TorchBackend(ComputeBackend):
	"""Runs the multiply with torch.matmul on float64 tensors"""

	name = "torch"

	def __init__(self, device: Optional[str] = None):
		try:
			self.device = torch.device(device) if device else default_device()
		except RuntimeError as e:
			raise BackendUnavailableError(f"invalid torch device '{device}': {e}", backend=self.name)
		if self.device.type == "cuda" and not torch.cuda.is_available():
			raise BackendUnavailableError("no CUDA/ROCm device is visible to torch", backend=self.name)
		super().__init__()

	def _get_device_info(self) -> DeviceInfo:
		if self.device.type == "cuda":
			name = torch.cuda.get_device_name(self.device)
			if torch.version.hip is not None:
				name = f"{name} (ROCm {torch.version.hip})"
			return DeviceInfo(backend=self.name, name=name, kind="gpu")
		return DeviceInfo(backend=self.name, name=f"CPU (torch {torch.__version__})", kind="cpu")

	def _to_device(self, host: np.ndarray) -> torch.Tensor:
		try:
			return torch.from_numpy(host).to(self.device, dtype=torch.float64, copy=True)
		except RuntimeError as e:
			raise BackendFault(f"copy to {self.device} failed: {e}", BackendStatus.OUT_OF_RESOURCES)

	def _to_host(self, storage: torch.Tensor, host: np.ndarray):
		try:
			np.copyto(host, storage.detach().cpu().numpy())
		except RuntimeError as e:
			raise BackendFault(f"copy back from {self.device} failed: {e}", BackendStatus.INVALID_OPERATION)

	def _synchronize(self):
		if self.device.type != "cuda":
			return
		try:
			torch.cuda.synchronize(self.device)
		except RuntimeError as e:
			raise BackendFault(f"device error: {e}", BackendStatus.INVALID_OPERATION)

	def _gemm(self, trans_a, trans_b, m, n, k, alpha, a, lda, b, ldb, beta, c, ldc, context):
		if m == 0 or n == 0:
			return

		a_rows, a_cols = (m, k) if trans_a is Transpose.NONTRANS else (k, m)
		b_rows, b_cols = (k, n) if trans_b is Transpose.NONTRANS else (n, k)

		try:
			with torch.no_grad():
				op_a = torch.as_strided(a, (a_rows, a_cols), (1, lda))
				op_b = torch.as_strided(b, (b_rows, b_cols), (1, ldb))
				if trans_a is Transpose.TRANS:
					op_a = op_a.t()
				if trans_b is Transpose.TRANS:
					op_b = op_b.t()
				c_view = torch.as_strided(c, (m, n), (1, ldc))

				product = torch.matmul(op_a, op_b)
				if alpha != 1.0:
					product.mul_(alpha)
				if beta == 0.0:
					c_view.copy_(product)
				else:
					c_view.copy_(product.add_(c_view, alpha=beta))
		except torch.cuda.OutOfMemoryError as e:
			raise BackendFault(f"device ran out of memory: {e}", BackendStatus.OUT_OF_RESOURCES)
		except RuntimeError as e:
			raise BackendFault(f"torch GEMM failed: {e}", BackendStatus.INVALID_OPERATION)
