"""
Unit tests for the CSV exporter.
"""

import pytest
import csv
import io

from cineshelf.agents.export import CSV_COLUMNS, CsvExporter
from cineshelf.models.movie import Movie


def parse(text):
    return list(csv.reader(io.StringIO(text)))


def test_quoted_title_round_trips():
    """A title with a comma and quotes is recovered exactly by a CSV reader."""
    movie = Movie(id=1, title='Movie, "One"', year=2020, genre=["Drama"], director="Jane Doe")

    rows = parse(CsvExporter().generate([movie]))

    assert rows[0] == CSV_COLUMNS
    assert rows[1][1] == 'Movie, "One"'


def test_row_layout():
    movie = Movie(
        id=3,
        title="Heat",
        year=1995,
        genre=["Crime", "Thriller"],
        rating=8.3,
        director="Michael Mann",
        runtime=170,
        cast=["Al Pacino", "Robert De Niro"],
        review_count=2,
        average_review_rating=4.26,
    )

    row = dict(zip(CSV_COLUMNS, parse(CsvExporter().generate([movie]))[1]))

    assert row["ID"] == "3"
    assert row["Genre"] == "Crime, Thriller"
    assert row["Cast"] == "Al Pacino, Robert De Niro"
    assert row["Runtime"] == "170"
    assert row["Review Count"] == "2"
    assert row["Average Rating"] == "4.3"


def test_average_has_one_decimal():
    movie = Movie(id=1, title="A", year=2000, genre=["Drama"], director="B", average_review_rating=4.0)

    rows = parse(CsvExporter().generate([movie]))

    assert rows[1][CSV_COLUMNS.index("Average Rating")] == "4.0"


def test_newlines_and_quotes_round_trip():
    """Embedded newlines in text fields stay inside one record."""
    movie = Movie(id=1, title="Line one\nLine two", year=2000, genre=["Drama"], director='Dir "X"')

    rows = parse(CsvExporter().generate([movie]))

    assert len(rows) == 2
    assert rows[1][1] == "Line one\nLine two"
    assert rows[1][5] == 'Dir "X"'


def test_rows_keep_given_order():
    movies = [
        Movie(id=2, title="B", year=2000, genre=["Drama"], director="X"),
        Movie(id=1, title="A", year=2000, genre=["Drama"], director="X"),
    ]

    rows = parse(CsvExporter().generate(movies))

    assert [r[0] for r in rows[1:]] == ["2", "1"]


def test_empty_export_is_header_only():
    text = CsvExporter().generate([])

    assert parse(text) == [CSV_COLUMNS]


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
