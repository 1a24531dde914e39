# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Advanced Micro Devices, Inc. All rights reserved.

"""Host-side reference product used as the verification oracle."""

import numpy as np

from .logger import logger


def reference_inputs(m: int, n: int, p: int):
	"""Build row-major A (m x n) and B (n x p) directly from the value pattern.

	Independent of matrix.generate_inputs so a generator bug cannot mask
	itself in the reference.
	"""
	a_host = np.empty((m, n), dtype=np.float64)
	b_host = np.empty((n, p), dtype=np.float64)

	# a_host[i][j] = j + 1
	a_host[:, :] = np.arange(1, n + 1, dtype=np.float64)[np.newaxis, :]
	# b_host[i][j] = i + 1
	b_host[:, :] = np.arange(1, n + 1, dtype=np.float64)[:, np.newaxis]

	return a_host, b_host


def reference_multiply(m: int, n: int, p: int) -> np.ndarray:
	"""Compute the expected m x p product as a row-major 2-D array.

	Accumulation follows the i, k, j nesting: every c[i][j] starts at zero
	and receives a[i][k] * b[k][j] for k = 0..n-1 in order. The j loop runs
	as a vectorized row update, which performs the same multiply and add per
	element as the scalar loop.

	Args:
		m: Rows of the result
		n: Shared inner dimension
		p: Columns of the result

	Returns:
		float64 array of shape (m, p)
	"""
	a_host, b_host = reference_inputs(m, n, p)
	c_host = np.zeros((m, p), dtype=np.float64)

	logger.debug(f"Computing host reference for c({m},{p})")
	for i in range(m):
		c_row = c_host[i]
		for k in range(n):
			c_row += a_host[i, k] * b_host[k]

	return c_host


def closed_form_product(n: int) -> float:
	"""Value every element of the reference product must take.

	With a[i][k] = k + 1 and b[k][j] = k + 1, each element is the sum of
	squares 1^2 + ... + n^2 = n(n + 1)(2n + 1) / 6.
	"""
	return float(n * (n + 1) * (2 * n + 1) // 6)
