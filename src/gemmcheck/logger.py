# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Advanced Micro Devices, Inc. All rights reserved.

"""
gemmcheck logging utilities

Console verdicts (the problem banner, "Device:", mismatch lines and the
final success/fail line) are printed directly. This logger carries the
diagnostics around them: backend selection, the gemm arguments, queued
asynchronous faults and report files. Its level comes from --log or
GEMMCHECK_LOG_LEVEL, and it is quiet below WARNING by default.
"""

import logging


class GemmCheckLogger:
	"""Logger that automatically prefixes all messages with [GEMMCHECK]"""

	def __init__(self, name: str = "gemmcheck"):
		self._logger = logging.getLogger(name)

	def set_level(self, level: str):
		"""
		Set logging level

		Args:
			level: Log level string (debug, info, warning, error)
		"""
		log_level = getattr(logging, level.upper())
		logging.basicConfig(level=log_level, format="%(message)s")
		self._logger.setLevel(log_level)

	def debug(self, msg: str, *args, **kwargs):
		self._logger.debug(f"[GEMMCHECK] {msg}", *args, **kwargs)

	def info(self, msg: str, *args, **kwargs):
		self._logger.info(f"[GEMMCHECK] {msg}", *args, **kwargs)

	def warning(self, msg: str, *args, **kwargs):
		self._logger.warning(f"[GEMMCHECK] {msg}", *args, **kwargs)

	def error(self, msg: str, *args, **kwargs):
		self._logger.error(f"[GEMMCHECK] {msg}", *args, **kwargs)

	def critical(self, msg: str, *args, **kwargs):
		self._logger.critical(f"[GEMMCHECK] {msg}", *args, **kwargs)


# Global logger instance
logger = GemmCheckLogger()
