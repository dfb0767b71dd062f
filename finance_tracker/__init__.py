"""
Finance Tracker - Core Package

The reactive state and aggregation core of a single-user personal
finance tracker: accounts, transactions and budgets held in memory,
with live aggregates derived from them.

DESIGN PRINCIPLES:
1. Stores are the only mutators of their collections
2. Every mutation replaces the collection (copy-on-write)
3. Derived values are never stored, only computed
4. Failures leave the store exactly as it was
5. Cross-store side effects are explicit, never implicit
6. The session backend is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
