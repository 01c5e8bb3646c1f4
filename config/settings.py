"""
Configuration settings for CineShelf.

Centralized configuration for the catalog store, query defaults and export.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = Path(os.getenv("CINESHELF_DATA_ROOT", str(PROJECT_ROOT / "data")))
OUTPUT_ROOT = PROJECT_ROOT / "output"

# Credential Gate (shared secret, compared against the decoded bearer token)
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

# Genre vocabulary accepted on movie writes
GENRES = (
    "Action",
    "Adventure",
    "Animation",
    "Crime",
    "Drama",
    "Fantasy",
    "Mystery",
    "Romance",
    "Sci-Fi",
    "Thriller",
)

# Query defaults
DEFAULT_SORT_BY = "rating"
DEFAULT_SORT_ORDER = "desc"  # "asc" or "desc"
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100  # Larger requests are clamped to this

# Review constraints
MIN_REVIEW_RATING = 1
MAX_REVIEW_RATING = 5

# Export
CSV_EXPORT_FILENAME = "movies.csv"

# Logging
LOG_LEVEL = os.getenv("CINESHELF_LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "cineshelf.log"
