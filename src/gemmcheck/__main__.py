# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Advanced Micro Devices, Inc. All rights reserved.

import sys

from .cli.main import main

if __name__ == "__main__":
	sys.exit(main())
