"""Allow running as ``python -m watchlist_porter.cli``."""

from .main import main

main()
