#!/usr/bin/env python

"""
Driver Log - Main Entry Point

Earnings tracking for delivery drivers: pay-per-item and daily-rate
entries, monthly history, dashboard figures and CSV/Excel export.

Usage:
    python main.py --help
"""

import sys
from pathlib import Path

# Add app directory to path
sys.path.insert(0, str(Path(__file__).parent))

from driverlog.cli import main


if __name__ == "__main__":
    sys.exit(main())
