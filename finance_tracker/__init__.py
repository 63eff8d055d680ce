"""
Finance Tracker - Source Package

A small personal finance tracker: record income and expense transactions,
see the current month against your targets, and browse monthly reports.

DESIGN PRINCIPLES:
1. Aggregation is pure - computations never touch storage
2. Storage layer is swappable (local JSON files or a remote document store)
3. Every write re-persists the whole collection
4. Backend selection happens once, at startup
"""

__version__ = "1.0.0"
