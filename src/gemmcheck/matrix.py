# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Advanced Micro Devices, Inc. All rights reserved.

"""Column-major matrices and the structured input generator."""

from dataclasses import dataclass
from typing import Tuple

import numpy as np


@dataclass
class Matrix:
	"""Dense float64 matrix backed by one contiguous column-major buffer.

	Element (i, j) lives at data[i + j * rows]. The leading dimension equals
	the row count; no padding is used.

	Attributes:
		rows: Number of rows
		cols: Number of columns
		data: 1-D float64 buffer of length rows * cols
	"""

	rows: int
	cols: int
	data: np.ndarray

	def __post_init__(self):
		if self.data.ndim != 1 or self.data.size != self.rows * self.cols:
			raise ValueError(
				f"buffer of shape {self.data.shape} does not hold a {self.rows}x{self.cols} matrix"
			)

	@classmethod
	def empty(cls, rows: int, cols: int) -> "Matrix":
		return cls(rows, cols, np.empty(rows * cols, dtype=np.float64))

	@property
	def ld(self) -> int:
		"""Leading dimension (column stride in elements)."""
		return self.rows

	@property
	def shape(self) -> Tuple[int, int]:
		return (self.rows, self.cols)

	def index(self, i: int, j: int) -> int:
		return i + j * self.rows

	def at(self, i: int, j: int) -> float:
		return float(self.data[self.index(i, j)])

	def as_2d(self) -> np.ndarray:
		"""Fortran-ordered (rows, cols) view sharing the buffer."""
		return self.data.reshape((self.rows, self.cols), order="F")

	def __repr__(self) -> str:
		return f"Matrix(rows={self.rows}, cols={self.cols})"


def generate_inputs(m: int, n: int, p: int) -> Tuple[Matrix, Matrix, Matrix]:
	"""Allocate A (m x n), B (n x p) and C (m x p) and fill A and B.

	A holds its 1-indexed column number in every row and B holds its
	1-indexed row number in every column. C is left uninitialized since the
	backend overwrites it.

	Args:
		m: Rows of A and C
		n: Columns of A, rows of B
		p: Columns of B and C

	Returns:
		Tuple (A, B, C)
	"""
	a = Matrix.empty(m, n)
	b = Matrix.empty(n, p)
	c = Matrix.empty(m, p)

	# Column-major: A's column j is the run a.data[j*m:(j+1)*m]
	for j in range(n):
		a.data[j * m : (j + 1) * m] = j + 1.0

	# B's column j repeats the row numbers 1..n
	row_values = np.arange(1, n + 1, dtype=np.float64)
	for j in range(p):
		b.data[j * n : (j + 1) * n] = row_values

	return a, b, c
