# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Advanced Micro Devices, Inc. All rights reserved.

"""Element-wise comparison of the offloaded result against the reference."""

from typing import Callable, Optional

import numpy as np

from .config import DEFAULT_MAX_REPORTS, SCAN_ALL, SCAN_POLICIES, SCAN_STOP
from .logger import logger
from .result import ComparisonResult, Mismatch

EPSILON = float(np.finfo(np.float64).eps)


def values_same(a: float, b: float, tolerance: float = EPSILON) -> bool:
	"""True if |a - b| is strictly below the tolerance (absolute, not scaled)."""
	return abs(a - b) < tolerance


def compare_results(
	observed: np.ndarray,
	expected: np.ndarray,
	tolerance: float = EPSILON,
	max_reports: int = DEFAULT_MAX_REPORTS,
	scan_policy: str = SCAN_STOP,
	echo: Optional[Callable[[str], None]] = print,
) -> ComparisonResult:
	"""Compare a column-major result buffer with a row-major reference.

	Elements are visited row by row, observed[i + j * M] against
	expected[i][j]. Each mismatch up to max_reports is recorded and echoed.
	With the "stop" policy the scan ends as soon as the cap is reached, so
	later elements are never compared; with "scan-all" every element is
	compared and only the echo is capped.

	Args:
		observed: 1-D buffer of M * P values in column-major order
		expected: (M, P) reference array
		tolerance: Absolute tolerance
		max_reports: Cap on recorded and echoed mismatches
		scan_policy: "stop" or "scan-all"
		echo: Callable receiving each diagnostic line, or None for silence

	Returns:
		ComparisonResult for the scan
	"""
	if scan_policy not in SCAN_POLICIES:
		raise ValueError(f"scan_policy must be one of {SCAN_POLICIES}, got '{scan_policy}'")

	m, p = expected.shape
	if observed.size != m * p:
		raise ValueError(f"observed buffer holds {observed.size} elements, expected {m * p}")

	observed_2d = observed.reshape((m, p), order="F")
	# Same predicate as values_same; NaN compares as a mismatch
	same = np.abs(observed_2d - expected) < tolerance
	# argwhere yields (i, j) in row-major order, the scan order
	bad = np.argwhere(~same)

	total = m * p
	result = ComparisonResult(all_matched=True, total_elements=total, elements_compared=total)

	for i, j in bad:
		i, j = int(i), int(j)
		mismatch = Mismatch(row=i, col=j, expected=float(expected[i, j]), observed=float(observed_2d[i, j]))
		result.all_matched = False
		result.mismatch_count += 1

		if len(result.mismatches) < max_reports:
			result.mismatches.append(mismatch)
			if echo is not None:
				echo(f"fail - The result is incorrect for {mismatch}")
				result.reports_emitted += 1

		if len(result.mismatches) >= max_reports:
			if scan_policy == SCAN_STOP:
				result.elements_compared = i * p + j + 1
				result.truncated = result.elements_compared < total
				break
			if scan_policy == SCAN_ALL:
				result.mismatch_count = len(bad)
				break

	logger.debug(
		f"Compared {result.elements_compared}/{total} elements, "
		f"{result.mismatch_count} mismatch(es), policy={scan_policy}"
	)
	return result
