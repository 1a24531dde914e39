# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Advanced Micro Devices, Inc. All rights reserved.

"""Result classes for gemmcheck verification."""

from dataclasses import dataclass, field
from typing import List, Optional

from .backends.base import DeviceInfo, GemmStatus

EXIT_SUCCESS = 0
EXIT_MISMATCH = -1
EXIT_BACKEND_FAULT = -2


@dataclass(frozen=True)
class Mismatch:
	"""One element of the offloaded result outside tolerance.

	Args:
		row: Row index i of the element
		col: Column index j of the element
		expected: Reference value
		observed: Value read back from the offload result
	"""

	row: int
	col: int
	expected: float
	observed: float

	@property
	def difference(self) -> float:
		return abs(self.observed - self.expected)

	def __str__(self) -> str:
		"""Human-readable diagnostic line."""
		return f"element [{self.row}, {self.col}], expected: {self.expected!r}, got: {self.observed!r}"


@dataclass
class ComparisonResult:
	"""Outcome of the element-wise scan.

	Args:
		all_matched: True if no compared element was outside tolerance
		mismatches: Mismatches recorded and reported, at most the report cap
		mismatch_count: Mismatches found among the compared elements
		elements_compared: Number of element pairs actually compared
		total_elements: Size of the result (M * P)
		truncated: True if the scan stopped early at the report cap
		reports_emitted: Number of diagnostic lines printed
	"""

	all_matched: bool
	mismatches: List[Mismatch] = field(default_factory=list)
	mismatch_count: int = 0
	elements_compared: int = 0
	total_elements: int = 0
	truncated: bool = False
	reports_emitted: int = 0


@dataclass
class DispatchResult:
	"""Outcome of the offload step.

	Args:
		device: Device the backend ran on
		status: Status of the multiply call
	"""

	device: DeviceInfo
	status: GemmStatus

	@property
	def completed(self) -> bool:
		return self.status.completed


@dataclass
class VerificationResult:
	"""Result of a full gemmcheck run."""

	comparison: ComparisonResult
	dispatch: Optional[DispatchResult] = None
	problem: dict = field(default_factory=dict)

	@property
	def offload_faulted(self) -> bool:
		return self.dispatch is not None and not self.dispatch.completed

	@property
	def passed(self) -> bool:
		# A faulted offload never passes, even if C happens to hold the right values
		return self.comparison.all_matched and not self.offload_faulted

	@property
	def exit_code(self) -> int:
		if self.passed:
			return EXIT_SUCCESS
		if not self.comparison.all_matched:
			return EXIT_MISMATCH
		return EXIT_BACKEND_FAULT

	def summary(self) -> str:
		"""Get a human-readable summary of the verification."""
		if self.passed:
			return "success - The results are correct!"

		lines = ["fail - The results mis-match!"]
		if self.offload_faulted:
			lines.append(
				f"  offload faulted with status {self.dispatch.status.code}: {self.dispatch.status.message}"
			)
		c = self.comparison
		scope = "scan stopped early" if c.truncated else "full scan"
		lines.append(
			f"  {c.mismatch_count} mismatch(es) in {c.elements_compared}/{c.total_elements} elements ({scope})"
		)
		return "\n".join(lines)

	def __str__(self) -> str:
		return self.summary()

	def to_dict(self) -> dict:
		"""Plain-data form used by the report writers."""
		data = {
			"problem": dict(self.problem),
			"passed": self.passed,
			"exit_code": self.exit_code,
			"elements_compared": self.comparison.elements_compared,
			"total_elements": self.comparison.total_elements,
			"truncated": self.comparison.truncated,
			"mismatch_count": self.comparison.mismatch_count,
			"mismatches": [
				{"row": mm.row, "col": mm.col, "expected": mm.expected, "observed": mm.observed}
				for mm in self.comparison.mismatches
			],
		}
		if self.dispatch is not None:
			data["device"] = {
				"backend": self.dispatch.device.backend,
				"name": self.dispatch.device.name,
				"kind": self.dispatch.device.kind,
			}
			data["backend_status"] = {
				"completed": self.dispatch.status.completed,
				"code": self.dispatch.status.code,
				"message": self.dispatch.status.message,
			}
		return data
