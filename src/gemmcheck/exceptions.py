# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Advanced Micro Devices, Inc. All rights reserved.

"""Custom exceptions for gemmcheck."""

from enum import IntEnum


class BackendStatus(IntEnum):
	"""Status codes reported alongside backend faults."""

	SUCCESS = 0
	DEVICE_NOT_FOUND = -1
	OUT_OF_RESOURCES = -5
	INVALID_VALUE = -30
	INVALID_DEVICE = -33
	INVALID_OPERATION = -59
	UNKNOWN = -9999


class GemmCheckError(Exception):
	"""Base exception for all gemmcheck errors."""

	pass


class ConfigError(GemmCheckError, ValueError):
	"""Raised when a problem configuration is invalid."""

	pass


class BackendUnavailableError(GemmCheckError):
	"""Raised when a compute backend cannot be loaded."""

	def __init__(self, message: str, backend: str = None):
		super().__init__(message)
		self.backend = backend


class BackendFault(GemmCheckError):
	"""Raised by a backend when a GEMM call fails synchronously."""

	def __init__(self, message: str, code: int = BackendStatus.UNKNOWN):
		super().__init__(message)
		self.message = message
		self.code = int(code)

	def __str__(self) -> str:
		return f"{self.message} (status {self.code})"


class AsyncBackendFault(BackendFault):
	"""Fault raised on the backend's asynchronous channel after submission."""

	pass
