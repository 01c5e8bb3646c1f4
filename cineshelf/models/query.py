"""
Query data models.

A QuerySpec describes one listing request; a QueryResult is the page
the query engine returns for it.
"""

from dataclasses import dataclass, field
from typing import List

from cineshelf.models.movie import Movie
import config.settings as settings


@dataclass
class QuerySpec:
    """
    Search term, genre filter, sort key/direction and page parameters.
    Empty search/genre mean "no filtering" at that stage.
    """
    search: str = ""
    genre: str = ""
    sort_by: str = settings.DEFAULT_SORT_BY
    sort_order: str = settings.DEFAULT_SORT_ORDER  # "asc" or "desc"
    page: int = 1
    page_size: int = settings.DEFAULT_PAGE_SIZE


@dataclass
class QueryResult:
    """One page of a filtered, sorted collection."""
    page: List[Movie] = field(default_factory=list)
    total: int = 0  # Matches after search and genre filter
    page_count: int = 0
    page_number: int = 1
    page_size: int = settings.DEFAULT_PAGE_SIZE

    def to_dict(self) -> dict:
        """Paginated response shape: data, total, page, pageSize, totalPages."""
        return {
            "data": [movie.to_dict() for movie in self.page],
            "total": self.total,
            "page": self.page_number,
            "pageSize": self.page_size,
            "totalPages": self.page_count,
        }
