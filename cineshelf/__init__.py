"""
CineShelf - movie catalog store.

Cached flat-file document store for movies and reviews, with a shared
query engine for listing and CSV export.
"""

__version__ = "1.0.0"
