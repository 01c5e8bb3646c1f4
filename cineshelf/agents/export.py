"""
CSV Exporter.

Renders a sorted movie selection as CSV text.
"""

import csv
import logging
from typing import List

import pandas as pd

from cineshelf.models.movie import Movie

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    "ID",
    "Title",
    "Year",
    "Genre",
    "Rating",
    "Director",
    "Runtime",
    "Cast",
    "Review Count",
    "Average Rating",
]


class CsvExporter:
    """
    Builds the movie export table.

    Text fields containing the delimiter, quotes or newlines are quoted and
    embedded quotes doubled, so any CSV reader recovers the original text.
    """

    def to_dataframe(self, movies: List[Movie]) -> pd.DataFrame:
        """One row per movie, in the given order."""
        rows = [
            {
                "ID": movie.id,
                "Title": movie.title,
                "Year": movie.year,
                "Genre": ", ".join(movie.genre),
                "Rating": movie.rating,
                "Director": movie.director,
                "Runtime": movie.runtime,
                "Cast": ", ".join(movie.cast),
                "Review Count": movie.review_count,
                "Average Rating": f"{movie.average_review_rating:.1f}",
            }
            for movie in movies
        ]
        return pd.DataFrame(rows, columns=CSV_COLUMNS)

    def generate(self, movies: List[Movie]) -> str:
        """
        Render movies as CSV text.

        Args:
            movies: Movies already filtered and sorted

        Returns:
            CSV with a header line; only the header when movies is empty
        """
        df = self.to_dataframe(movies)
        text = df.to_csv(index=False, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")

        logger.info(f"Generated CSV export with {len(df)} movies")
        return text
