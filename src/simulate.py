#!/usr/bin/env python3
"""
SCOREWALL Simulation Mode

Quick launcher for testing without a live competition.
Equivalent to: python run.py --simulate --debug
"""

import sys
from pathlib import Path

# Add scorewall package to path
sys.path.insert(0, str(Path(__file__).parent))

from scorewall.main import main

SIMULATION_FLAGS = ["--simulate", "--debug"]


def run(argv=None):
    """Start the wall fed by the competition simulator, with debug logging."""
    args = list(sys.argv[1:] if argv is None else argv)
    main(args + SIMULATION_FLAGS)


if __name__ == "__main__":
    run()
