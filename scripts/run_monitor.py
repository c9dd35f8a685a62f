#!/usr/bin/env python3
"""Entry point: run the port monitor from a source checkout.

Usage: python scripts/run_monitor.py [config_path] [--debug]
Relative config paths resolve against the project root.
"""

import os
import sys

# Project root: always resolve relative to script location, not cwd
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _PROJECT_ROOT)
os.chdir(_PROJECT_ROOT)  # Ensure default config paths resolve from project root


if __name__ == "__main__":
    from portwatch.app.monitor import main

    argv = sys.argv[1:]
    sys.exit(main(argv))
