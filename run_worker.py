#!/usr/bin/env python3
"""
patch-parser Worker

Runs the NSQ pull request worker from a source checkout.
"""

import sys
from pathlib import Path

# Add src directory to Python path
src_path = Path(__file__).parent / "src"
sys.path.insert(0, str(src_path))

from patch_parser.cli import main

if __name__ == '__main__':
    print("🚀 Starting patch-parser worker...")
    sys.exit(main())
