"""
FinHealth - Source Package

Personal finance tracker: assets, debts and cash flow in one place,
with derived metrics and an optional AI advisor.

DESIGN PRINCIPLES:
1. One state object, replaced wholesale on every change
2. Metrics are recomputed, never stored
3. Storage and advisor failures degrade, they never crash the app
"""

__version__ = "1.0.0"
__author__ = "FinHealth Team"
