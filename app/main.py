"""
Terminal entry point for Budget Tracker.

Run with `python -m app.main` from the project root, or use the
`budget-tracker` console script once installed.
"""

import sys

from budget_tracker.orchestrator import main


if __name__ == "__main__":
    sys.exit(main())
