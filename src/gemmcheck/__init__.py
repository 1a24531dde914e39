# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Advanced Micro Devices, Inc. All rights reserved.
"""gemmcheck: correctness oracle for an offloaded dense matrix multiply.

Public API:
    - GemmCheck: Driver that generates inputs, offloads, and verifies
    - ProblemConfig: Problem size, scalars, tolerance and report policy
    - Matrix / generate_inputs: Column-major matrices and the input pattern
    - reference_multiply / closed_form_product: Host oracle
    - OffloadDispatcher: Runs the GEMM on a ComputeBackend
    - compare_results / values_same: Element-wise tolerance check
    - Exceptions: GemmCheckError, ConfigError, BackendFault, etc.

Quick Example:
    >>> from gemmcheck import GemmCheck, ProblemConfig
    >>> result = GemmCheck(ProblemConfig(size=600, backend="numpy")).run()
    Problem size: c(75,300) = a(75,150) * b(150,300)
    Device: ...
    success - The results are correct!
    >>> result.exit_code
    0
"""

from importlib.metadata import PackageNotFoundError, version

from .api import GemmCheck
from .backends import ComputeBackend, Transpose, get_backend
from .comparator import EPSILON, compare_results, values_same
from .config import ProblemConfig
from .dispatcher import OffloadDispatcher, terminate_on_fault
from .exceptions import (
	AsyncBackendFault,
	BackendFault,
	BackendStatus,
	BackendUnavailableError,
	ConfigError,
	GemmCheckError,
)
from .matrix import Matrix, generate_inputs
from .reference import closed_form_product, reference_multiply
from .result import ComparisonResult, DispatchResult, Mismatch, VerificationResult

try:
	__version__ = version("gemmcheck")
except PackageNotFoundError:
	__version__ = "0.0.0"

__all__ = [
	"GemmCheck",
	"ProblemConfig",
	"Matrix",
	"generate_inputs",
	"reference_multiply",
	"closed_form_product",
	"OffloadDispatcher",
	"terminate_on_fault",
	"compare_results",
	"values_same",
	"EPSILON",
	"ComputeBackend",
	"Transpose",
	"get_backend",
	"ComparisonResult",
	"DispatchResult",
	"Mismatch",
	"VerificationResult",
	"GemmCheckError",
	"ConfigError",
	"BackendFault",
	"AsyncBackendFault",
	"BackendStatus",
	"BackendUnavailableError",
]
