# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Advanced Micro Devices, Inc. All rights reserved.

"""
Run command implementation
"""

import csv
import json
from pathlib import Path

from ..api import GemmCheck
from ..config import ProblemConfig
from ..exceptions import ConfigError
from ..logger import logger
from ..result import VerificationResult


REPORT_FORMATS = (".json", ".csv")


def run_command(args):
	"""Execute one verification run and return its exit status"""

	output_path = None
	if args.output:
		output_path = Path(args.output)
		if output_path.suffix.lower() not in REPORT_FORMATS:
			raise ConfigError(
				f"Unsupported report format '{output_path.suffix}' for {output_path}; use one of {', '.join(REPORT_FORMATS)}"
			)

	config = ProblemConfig.from_env(
		size=args.size,
		backend=args.backend,
		scan_policy=args.scan_policy,
		max_reports=args.max_reports,
		log_level=args.log,
	)

	logger.info(f"{'='*80}")
	logger.info(f"gemmcheck: size={config.size} (M={config.m}, N={config.n}, P={config.p})")
	logger.info(f"Backend: {config.backend}, scan policy: {config.scan_policy}")
	logger.info(f"{'='*80}")

	checker = GemmCheck(config, device=args.device)
	result = checker.run()

	if output_path is not None:
		if output_path.suffix.lower() == ".csv":
			_write_csv_output(output_path, result)
		else:
			_write_json_output(output_path, result)

	return result.exit_code


def _write_json_output(output_path: Path, result: VerificationResult):
	"""Write the verification report to a JSON file"""
	with open(output_path, "w") as f:
		json.dump(result.to_dict(), f, indent=2)

	logger.info(f"Report written to {output_path}")


def _write_csv_output(output_path: Path, result: VerificationResult):
	"""Write the verification report to a CSV file

	Every row carries the run summary; failing runs get one row per recorded
	mismatch, passing runs a single row with the element columns empty.
	"""
	report = result.to_dict()
	problem = report["problem"]
	device = report.get("device", {})
	status = report.get("backend_status", {})

	with open(output_path, "w", newline="") as f:
		writer = csv.writer(f)

		# Header
		writer.writerow([
			"size", "m", "n", "p",
			"backend", "device",
			"status_code", "status_message",
			"passed", "exit_code",
			"row", "col", "expected", "observed", "difference",
		])

		summary = [
			problem["size"], problem["m"], problem["n"], problem["p"],
			device.get("backend", ""), device.get("name", ""),
			status.get("code", ""), status.get("message", ""),
			report["passed"], report["exit_code"],
		]

		# Data rows
		mismatches = result.comparison.mismatches
		if not mismatches:
			writer.writerow(summary + ["", "", "", "", ""])
		for mismatch in mismatches:
			writer.writerow(
				summary + [mismatch.row, mismatch.col, mismatch.expected, mismatch.observed, mismatch.difference]
			)

	logger.info(f"Report written to {output_path}")
