#!/usr/bin/env python3
"""
SCOREWALL - Attack-Defense Status Wall

Launcher for running from a source checkout.
Equivalent to the installed `scorewall` command.
"""

import sys
from pathlib import Path

# Add scorewall package to path
sys.path.insert(0, str(Path(__file__).parent))

from scorewall.main import main

if __name__ == "__main__":
    main()
