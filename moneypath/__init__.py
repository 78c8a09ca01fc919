"""
MoneyPath - Source Package

A personal and shared finance tracker: log personal expenses, split shared
roommate expenses, see who owes whom, and keep a monthly archive.

DESIGN PRINCIPLES:
1. One explicitly owned state, changed only through commands
2. Figures are derived, never stored twice for the live month
3. Bad input is declined, never half-applied
4. Persistence failures are logged, never shown to the user
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "MoneyPath Team"
