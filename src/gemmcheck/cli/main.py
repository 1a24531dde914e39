#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Advanced Micro Devices, Inc. All rights reserved.

"""
gemmcheck CLI - Main entry point
"""

import argparse
import os
import sys

from .. import __version__
from ..config import SCAN_POLICIES
from .list_cmd import list_command
from .run_cmd import run_command


def create_parser():
	"""Create argument parser"""

	parser = argparse.ArgumentParser(
		prog="gemmcheck",
		description="gemmcheck - verify an offloaded GEMM against a host reference.",
		formatter_class=argparse.RawDescriptionHelpFormatter,
		epilog="""
Examples:
  # Verify with the default problem (size 600: c(75,300) = a(75,150) * b(150,300))
  gemmcheck

  # Run on the accelerator through PyTorch
  gemmcheck run --backend torch --device cuda:0

  # Keep scanning after the fifth mismatch and save a report
  gemmcheck run --scan-policy scan-all --output report.json

  # Show which backends are installed
  gemmcheck list backends
""",
	)

	parser.add_argument("--version", action="version", version=f"gemmcheck {__version__}")

	subparsers = parser.add_subparsers(dest="command", help="Available commands")

	# Run command
	run_parser = subparsers.add_parser(
		"run",
		help="Run one verification",
		description="Multiply the generated matrices on a backend and check the result",
	)

	run_parser.add_argument(
		"--size",
		"-s",
		type=int,
		default=None,
		help="Base size, a positive multiple of 8; M=size/8, N=size/4, P=size/2 (default: 600)",
	)

	run_parser.add_argument(
		"--backend",
		"-b",
		default=None,
		help="Compute backend: numpy, torch or auto (default: auto)",
	)

	run_parser.add_argument(
		"--device",
		"-d",
		default=None,
		help="Device for the backend (e.g. cuda:1); backend default when omitted",
	)

	run_parser.add_argument(
		"--scan-policy",
		choices=list(SCAN_POLICIES),
		default=None,
		help="Stop scanning at the report cap, or scan every element (default: stop)",
	)

	run_parser.add_argument(
		"--max-reports",
		type=int,
		default=None,
		metavar="K",
		help="Number of mismatch lines printed (default: 5)",
	)

	run_parser.add_argument(
		"--output",
		"-o",
		help="Report file; .json or .csv, chosen by extension",
	)

	run_parser.add_argument(
		"--log",
		"-l",
		type=str,
		choices=["debug", "info", "warning", "error"],
		default=None,
		help="Set logging level (default: warning)",
	)

	# List command
	list_parser = subparsers.add_parser(
		"list",
		help="List available backends",
		description="Show available options",
	)

	list_parser.add_argument(
		"item_type",
		choices=["backends"],
		help="Type of items to list",
	)

	return parser


def main(argv=None):
	"""Main CLI entry point"""
	from ..exceptions import GemmCheckError
	from ..logger import logger

	parser = create_parser()
	argv = list(sys.argv[1:] if argv is None else argv)

	# Bare invocation and flags without a subcommand mean 'run'
	if not argv or argv[0] not in ["run", "list", "--version", "-h", "--help"]:
		argv.insert(0, "run")

	args = parser.parse_args(argv)

	log_level = getattr(args, "log", None)
	logger.set_level(log_level or os.environ.get("GEMMCHECK_LOG_LEVEL", "warning"))

	try:
		if args.command == "run":
			return run_command(args)
		elif args.command == "list":
			return list_command(args)
		else:
			parser.print_help()
			return 1

	except KeyboardInterrupt:
		print("\n\nInterrupted by user")
		return 130

	except GemmCheckError as e:
		print(f"\nError: {e}", file=sys.stderr)
		if log_level == "debug":
			import traceback

			traceback.print_exc()
		return 1


if __name__ == "__main__":
	sys.exit(main())
