# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Advanced Micro Devices, Inc. All rights reserved.

"""
List command implementation
"""

from ..backends import available_backends, detect_backend


def list_command(args):
	"""List compute backends and which one auto-detection would pick"""
	if args.item_type == "backends":
		detected = detect_backend()
		print(f"\n{'─'*60}")
		print("Compute backends")
		print(f"{'─'*60}")
		for name, installed in available_backends().items():
			state = "available" if installed else "not installed"
			marker = " (auto)" if name == detected else ""
			print(f"  {name:10s} {state}{marker}")
		return 0

	print(f"Unknown item type: {args.item_type}")
	return 1
