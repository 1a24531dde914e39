# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Advanced Micro Devices, Inc. All rights reserved.

"""
High-level gemmcheck API

Generates the inputs, offloads the multiply, computes the host reference
and compares the two:
    checker = GemmCheck(ProblemConfig(size=600))
    result = checker.run()
    sys.exit(result.exit_code)
"""

import sys
from typing import Optional, Union

import numpy as np

from .backends import ComputeBackend, detect_or_default, get_backend
from .backends.base import FaultHandler
from .comparator import compare_results
from .config import ProblemConfig
from .dispatcher import OffloadDispatcher
from .logger import logger
from .matrix import Matrix, generate_inputs
from .reference import reference_multiply
from .result import DispatchResult, VerificationResult


class GemmCheck:
	"""
	Correctness oracle for an offloaded GEMM

	Usage:
		checker = GemmCheck(ProblemConfig(backend="numpy"))
		result = checker.run()
		if not result.passed:
			print(result.summary())
	"""

	def __init__(
		self,
		config: Optional[ProblemConfig] = None,
		backend: Union[ComputeBackend, str, None] = None,
		fault_handler: Optional[FaultHandler] = None,
		device: Optional[str] = None,
	):
		"""
		Initialize GemmCheck

		Args:
			config: Problem configuration (defaults to ProblemConfig())
			backend: Backend instance or name; config.backend when None
			fault_handler: Asynchronous fault handler (default aborts the process)
			device: Device string passed to the backend (e.g. "cuda:1")
		"""
		self.config = config if config is not None else ProblemConfig()

		if not isinstance(backend, ComputeBackend):
			name = detect_or_default(backend or self.config.backend)
			backend = get_backend(name, device)
		self.backend = backend
		self.dispatcher = OffloadDispatcher(backend, fault_handler)

		logger.info(f"Initialized with {self.backend.name} backend on {self.backend.device_info.name}")

	def offload(self, a: Matrix, b: Matrix, c: Matrix) -> DispatchResult:
		return self.dispatcher.dispatch(a, b, c, alpha=self.config.alpha, beta=self.config.beta)

	def expected(self) -> np.ndarray:
		"""Host reference scaled by alpha"""
		cfg = self.config
		expected = reference_multiply(cfg.m, cfg.n, cfg.p)
		if cfg.alpha != 1.0:
			expected *= cfg.alpha
		return expected

	def verify(self, observed: Matrix, dispatch: Optional[DispatchResult] = None) -> VerificationResult:
		"""
		Compare an offloaded result against the host reference

		Args:
			observed: The M x P result read back from the backend
			dispatch: Outcome of the offload, kept in the report

		Returns:
			VerificationResult; exit_code is 0 on success, -1 on mismatch,
			-2 when the offload faulted but every element matched
		"""
		cfg = self.config
		comparison = compare_results(
			observed.data,
			self.expected(),
			tolerance=cfg.tolerance,
			max_reports=cfg.max_reports,
			scan_policy=cfg.scan_policy,
		)
		result = VerificationResult(comparison=comparison, dispatch=dispatch, problem=cfg.to_dict())

		if result.passed:
			print("success - The results are correct!")
		elif not comparison.all_matched:
			print("fail - The results mis-match!", file=sys.stderr)
			logger.info(result.summary())
		else:
			print("fail - The offload faulted; its output cannot be trusted!", file=sys.stderr)
			logger.info(result.summary())
		return result

	def run(self) -> VerificationResult:
		"""Generate, offload, verify"""
		cfg = self.config
		print(cfg.banner())

		a, b, c = generate_inputs(cfg.m, cfg.n, cfg.p)
		dispatch = self.offload(a, b, c)
		return self.verify(c, dispatch)
