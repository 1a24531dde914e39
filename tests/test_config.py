"""
Unit tests for ProblemConfig
"""

import numpy as np
import pytest

from gemmcheck.config import ProblemConfig
from gemmcheck.exceptions import ConfigError


class TestDerivedSizes:
	"""Test M, N, P derived from the base size"""

	def test_default_problem(self):
		"""Default base size 600 gives the verification problem"""
		config = ProblemConfig()
		assert config.size == 600
		assert (config.m, config.n, config.p) == (75, 150, 300)

	def test_banner(self):
		config = ProblemConfig(size=64)
		assert config.banner() == "Problem size: c(8,32) = a(8,16) * b(16,32)"

	def test_defaults(self):
		config = ProblemConfig()
		assert config.alpha == 1.0
		assert config.beta == 0.0
		assert config.tolerance == np.finfo(np.float64).eps
		assert config.max_reports == 5
		assert config.scan_policy == "stop"


class TestValidation:
	"""Test rejection of invalid configurations"""

	@pytest.mark.parametrize("size", [0, -8, 12, 601])
	def test_size_must_be_positive_multiple_of_8(self, size):
		with pytest.raises(ConfigError, match="multiple of 8"):
			ProblemConfig(size=size)

	def test_size_must_be_integer(self):
		with pytest.raises(ConfigError):
			ProblemConfig(size=64.0)

	def test_nonzero_beta_rejected(self):
		with pytest.raises(ConfigError, match="beta"):
			ProblemConfig(beta=1.0)

	def test_unknown_scan_policy(self):
		with pytest.raises(ConfigError, match="scan_policy"):
			ProblemConfig(scan_policy="sometimes")

	def test_report_cap_must_be_positive(self):
		with pytest.raises(ConfigError):
			ProblemConfig(max_reports=0)

	def test_config_error_is_value_error(self):
		"""Callers catching ValueError still see config problems"""
		with pytest.raises(ValueError):
			ProblemConfig(size=7)

	def test_missing_backend_means_auto(self):
		assert ProblemConfig(backend=None).backend == "auto"
		assert ProblemConfig(backend="NumPy").backend == "numpy"


class TestConstructors:
	"""Test from_dict and from_env"""

	def test_from_dict_ignores_derived_keys(self):
		original = ProblemConfig(size=64, scan_policy="scan-all")
		restored = ProblemConfig.from_dict(original.to_dict())
		assert restored == original

	def test_from_env(self):
		environ = {
			"GEMMCHECK_SIZE": "128",
			"GEMMCHECK_BACKEND": "NumPy",
			"GEMMCHECK_SCAN_POLICY": "scan-all",
			"GEMMCHECK_MAX_REPORTS": "3",
			"GEMMCHECK_LOG_LEVEL": "debug",
		}
		config = ProblemConfig.from_env(environ)
		assert config.size == 128
		assert config.backend == "numpy"
		assert config.scan_policy == "scan-all"
		assert config.max_reports == 3
		assert config.log_level == "DEBUG"

	def test_overrides_beat_environment(self):
		config = ProblemConfig.from_env({"GEMMCHECK_SIZE": "128"}, size=64, backend=None)
		assert config.size == 64
		assert config.backend == "auto"

	def test_bad_integer_in_environment(self):
		with pytest.raises(ConfigError, match="Invalid integer"):
			ProblemConfig.from_env({"GEMMCHECK_SIZE": "lots"})
