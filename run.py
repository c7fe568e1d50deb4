#!/usr/bin/env python3
"""
Soulbound Registry - scenario runner script

Usage:
    python run.py config/scenarios/migrate_and_unlock.yaml
    python run.py scenario.yaml --config config/config.yaml
    python run.py scenario.yaml --quiet    # only print failed steps
"""

from __future__ import annotations

import sys

from soulbound.cli import main

if __name__ == "__main__":
    sys.exit(main())
