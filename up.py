#!/usr/bin/env python3
"""
global-up - Check and upgrade globally installed packages.

Detects npm, pnpm, yarn and bun, lists their global packages, compares
them with the latest versions on the npm registry and upgrades the ones
you pick with a single command per package manager.

Usage:
    up.py                 # Select packages to upgrade interactively
    up.py --all           # Upgrade every outdated package
    up.py --verbose       # Show debug logging
"""

from global_up.cli import run


if __name__ == "__main__":
    run()
