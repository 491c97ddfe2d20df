"""Entry point for running terminalsync as a module.

Usage:
    python -m terminalsync [--timeout S] command [args...]
"""

import sys

from terminalsync.cli import main

if __name__ == "__main__":
    sys.exit(main())
