#!/usr/bin/env python3
"""
Pair swap runner (same as `pair-swap` / `python -m pair_swap`)
"""
import sys

from pair_swap.cli import main

if __name__ == "__main__":
    sys.exit(main())
