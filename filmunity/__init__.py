"""Film Unity API: accounts, catalog, comments, ratings and video search."""

__version__ = "1.0.0"
