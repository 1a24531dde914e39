# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Advanced Micro Devices, Inc. All rights reserved.

"""Configuration classes for gemmcheck runs."""

import os
from dataclasses import asdict, dataclass, field
from typing import Optional

import numpy as np

from .exceptions import ConfigError

DEFAULT_SIZE = 600
DEFAULT_MAX_REPORTS = 5

SCAN_STOP = "stop"
SCAN_ALL = "scan-all"
SCAN_POLICIES = (SCAN_STOP, SCAN_ALL)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _machine_epsilon() -> float:
	return float(np.finfo(np.float64).eps)


@dataclass
class ProblemConfig:
	"""Configuration for one verification run.

	Args:
		size: Base size constant; M = size/8, N = size/4, P = size/2
		alpha: Scale applied to op(A) * op(B)
		beta: Scale applied to the prior contents of C
		tolerance: Absolute difference below which two elements are the same
		max_reports: Number of mismatch diagnostics printed before the cap applies
		scan_policy: "stop" ends the scan at the cap, "scan-all" keeps comparing
		backend: Backend name ("numpy", "torch") or "auto" to detect
		log_level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")

	Examples:
		>>> config = ProblemConfig(size=600)
		>>> (config.m, config.n, config.p)
		(75, 150, 300)
	"""

	size: int = DEFAULT_SIZE
	alpha: float = 1.0
	beta: float = 0.0
	tolerance: float = field(default_factory=_machine_epsilon)
	max_reports: int = DEFAULT_MAX_REPORTS
	scan_policy: str = SCAN_STOP
	backend: str = "auto"
	log_level: str = "WARNING"

	def __post_init__(self):
		"""Validate sizes and normalize string options."""
		if isinstance(self.size, bool) or not isinstance(self.size, (int, np.integer)):
			raise ConfigError(f"size must be an integer, got {type(self.size).__name__}")
		self.size = int(self.size)
		if self.size <= 0 or self.size % 8 != 0:
			raise ConfigError(f"size must be a positive multiple of 8, got {self.size}")

		# C is never initialized on the host, so it must be write-only
		if self.beta != 0.0:
			raise ConfigError(f"beta must be 0.0, got {self.beta}")

		if not self.tolerance > 0:
			raise ConfigError(f"tolerance must be positive, got {self.tolerance}")

		if self.max_reports < 1:
			raise ConfigError(f"max_reports must be at least 1, got {self.max_reports}")

		if self.scan_policy not in SCAN_POLICIES:
			raise ConfigError(f"scan_policy must be one of {SCAN_POLICIES}, got '{self.scan_policy}'")

		# None means pick one at run time, same as "auto"
		self.backend = (self.backend or "auto").lower()
		self.log_level = self.log_level.upper()
		if self.log_level not in LOG_LEVELS:
			raise ConfigError(f"log_level must be one of {LOG_LEVELS}, got '{self.log_level}'")

	@property
	def m(self) -> int:
		"""Rows of A and C."""
		return self.size // 8

	@property
	def n(self) -> int:
		"""Shared inner dimension: columns of A, rows of B."""
		return self.size // 4

	@property
	def p(self) -> int:
		"""Columns of B and C."""
		return self.size // 2

	def banner(self) -> str:
		"""Problem-size line printed at the start of a run."""
		return f"Problem size: c({self.m},{self.p}) = a({self.m},{self.n}) * b({self.n},{self.p})"

	def to_dict(self) -> dict:
		data = asdict(self)
		data.update(m=self.m, n=self.n, p=self.p)
		return data

	@classmethod
	def from_dict(cls, d: dict) -> "ProblemConfig":
		"""Create a ProblemConfig from a dictionary, ignoring derived keys."""
		known = {k: v for k, v in d.items() if k in cls.__dataclass_fields__}
		return cls(**known)

	@classmethod
	def from_env(cls, environ: Optional[dict] = None, **overrides) -> "ProblemConfig":
		"""Create a ProblemConfig from GEMMCHECK_* environment variables.

		Args:
			environ: Mapping to read instead of os.environ
			**overrides: Values that take precedence over the environment

		Returns:
			ProblemConfig instance
		"""
		if environ is None:
			environ = os.environ

		values = {}
		try:
			if "GEMMCHECK_SIZE" in environ:
				values["size"] = int(environ["GEMMCHECK_SIZE"])
			if "GEMMCHECK_MAX_REPORTS" in environ:
				values["max_reports"] = int(environ["GEMMCHECK_MAX_REPORTS"])
		except ValueError as e:
			raise ConfigError(f"Invalid integer in environment: {e}")
		if "GEMMCHECK_BACKEND" in environ:
			values["backend"] = environ["GEMMCHECK_BACKEND"]
		if "GEMMCHECK_SCAN_POLICY" in environ:
			values["scan_policy"] = environ["GEMMCHECK_SCAN_POLICY"]
		if "GEMMCHECK_LOG_LEVEL" in environ:
			values["log_level"] = environ["GEMMCHECK_LOG_LEVEL"]

		values.update({k: v for k, v in overrides.items() if v is not None})
		return cls(**values)
