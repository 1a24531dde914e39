# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Advanced Micro Devices, Inc. All rights reserved.

"""
Offload backends for the GEMM under test

- numpy: host BLAS, always available
- torch: CUDA/ROCm device through PyTorch (optional dependency)
"""

import importlib.util
from typing import Dict, Optional

from ..exceptions import BackendUnavailableError, ConfigError
from .base import (
	ComputeBackend,
	DeviceInfo,
	ExecutionContext,
	GemmStatus,
	SharedBuffer,
	Transpose,
)
from .numpy_backend import NumpyBackend

__all__ = [
	"ComputeBackend", "DeviceInfo", "ExecutionContext", "GemmStatus", "SharedBuffer",
	"Transpose", "NumpyBackend", "get_backend", "detect_backend", "detect_or_default",
	"available_backends",
]

_ALIASES = {
	"numpy": "numpy",
	"host": "numpy",
	"cpu": "numpy",
	"torch": "torch",
	"cuda": "torch",
	"rocm": "torch",
}


def _torch_installed() -> bool:
	return importlib.util.find_spec("torch") is not None


def _load_torch_backend():
	try:
		from .torch_backend import TorchBackend
	except ImportError as e:
		raise BackendUnavailableError(
			f"torch backend requires PyTorch: {e}. Install with 'pip install gemmcheck[torch]'",
			backend="torch",
		)
	return TorchBackend


def get_backend(name: str, device: Optional[str] = None) -> ComputeBackend:
	"""Get compute backend by name"""
	canonical = _ALIASES.get(name.lower())
	if canonical is None:
		raise ConfigError(
			f"Unsupported backend: {name}. "
			f"Supported: {', '.join(_ALIASES.keys())}"
		)

	if canonical == "numpy":
		if device not in (None, "cpu"):
			raise ConfigError(f"numpy backend only runs on the host, got device '{device}'")
		return NumpyBackend()

	backend_class = _load_torch_backend()
	return backend_class(device)


def detect_backend() -> str:
	"""
	Pick the backend for the current machine

	Returns:
		"torch" when PyTorch sees an accelerator, "numpy" otherwise
	"""
	if not _torch_installed():
		return "numpy"

	import torch

	return "torch" if torch.cuda.is_available() else "numpy"


def detect_or_default(requested: Optional[str] = None) -> str:
	"""
	Use the requested backend, or detect one when none (or "auto") is given
	"""
	if requested and requested.lower() != "auto":
		return requested
	return detect_backend()


def available_backends() -> Dict[str, bool]:
	"""Backend names mapped to whether they can be loaded here"""
	return {"numpy": True, "torch": _torch_installed()}
