#!/usr/bin/env python3
"""
bitflag command line entry point.

Thin wrapper around bitflag.cli so the tool can run from a checkout:

To run: python main.py --flag nice=1 --flag cats=2 --flag code=4 show 6
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from bitflag.cli import main

if __name__ == "__main__":
    main()
