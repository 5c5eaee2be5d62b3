"""
Budget Tracker - Source Package

A terminal-driven personal finance tracker: users, date-bounded budgets,
global categories and the expenses charged against them, kept in a single
JSON document on disk.

DESIGN PRINCIPLES:
1. One in-memory document, written through to disk after every change
2. Referential integrity is enforced by the services, not hoped for
3. Expected failures are outcomes, not exceptions
4. Every change is auditable
5. Storage backend is swappable
"""

__version__ = "1.0.0"
__author__ = "Budget Tracker Team"
