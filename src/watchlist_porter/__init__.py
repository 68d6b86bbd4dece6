"""Watchlist Porter.

Imports watchlists from loosely formatted CSV/JSON files, matches every row
against TMDb, reconciles duplicates with the stored watchlist and exports it
back in a versioned, re-importable format.
"""

__version__ = "0.1.0"
