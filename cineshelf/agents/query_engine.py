"""
Query Engine.

Search, genre filter, sort and pagination over a movie snapshot. Listing
and CSV export share the same filter and sort stages.
"""

import logging
import math
from typing import Callable, Dict, List, Tuple

from cineshelf.models.movie import Movie
from cineshelf.models.query import QueryResult, QuerySpec
from cineshelf.utils.errors import ValidationError
import config.settings as settings

logger = logging.getLogger(__name__)

# Sortable fields, each with a typed key extractor
SORT_FIELDS: Dict[str, Callable[[Movie], object]] = {
    "id": lambda m: m.id,
    "title": lambda m: m.title,
    "year": lambda m: m.year,
    "rating": lambda m: float(m.rating),
    "runtime": lambda m: m.runtime,
    "review_count": lambda m: m.review_count,
    "average_review_rating": lambda m: float(m.average_review_rating),
}

# Request spellings used by clients
SORT_ALIASES = {
    "reviewCount": "review_count",
    "averageReviewRating": "average_review_rating",
    "averageRating": "average_review_rating",
}

SORT_ORDERS = ("asc", "desc")


def resolve_sort(sort_by: str, sort_order: str) -> Tuple[str, str]:
    """
    Normalize and validate a sort key and direction.

    Returns:
        (canonical field name, "asc" | "desc")

    Raises:
        ValidationError: If the field is not sortable or the direction is unknown
    """
    field_name = SORT_ALIASES.get(sort_by, sort_by or settings.DEFAULT_SORT_BY)
    if field_name not in SORT_FIELDS:
        raise ValidationError(
            f"Invalid sortBy: {sort_by}. Must be one of {', '.join(SORT_FIELDS)}"
        )

    order = (sort_order or settings.DEFAULT_SORT_ORDER).lower()
    if order not in SORT_ORDERS:
        raise ValidationError(f"Invalid sortOrder: {sort_order}. Must be 'asc' or 'desc'")

    return field_name, order


class QueryEngine:
    """
    Applies search -> genre filter -> sort -> paginate, in that order.
    Never mutates the snapshot it is given.
    """

    def __init__(self, max_page_size: int = settings.MAX_PAGE_SIZE):
        self.max_page_size = max_page_size

    def query(self, snapshot: List[Movie], spec: QuerySpec) -> QueryResult:
        """
        Run the full pipeline for one listing request.

        Args:
            snapshot: Movie collection snapshot
            spec: Query parameters

        Returns:
            QueryResult with the requested page and totals computed after filtering

        Raises:
            ValidationError: On an unknown sort field/direction or non-positive page values
        """
        page_number, page_size = self._validate_page(spec.page, spec.page_size)

        movies = self.select(snapshot, spec.search, spec.genre, spec.sort_by, spec.sort_order)

        total = len(movies)
        page_count = math.ceil(total / page_size)
        start = (page_number - 1) * page_size
        page = movies[start:start + page_size]

        logger.debug(
            f"Query search={spec.search!r} genre={spec.genre!r} sort={spec.sort_by}/{spec.sort_order} "
            f"-> {total} matches, page {page_number}/{page_count}"
        )

        return QueryResult(
            page=page,
            total=total,
            page_count=page_count,
            page_number=page_number,
            page_size=page_size,
        )

    def select(
        self,
        snapshot: List[Movie],
        search: str = "",
        genre: str = "",
        sort_by: str = settings.DEFAULT_SORT_BY,
        sort_order: str = settings.DEFAULT_SORT_ORDER
    ) -> List[Movie]:
        """
        Search, filter and sort without paginating (used by export).

        Returns:
            New list of matching movies in sort order
        """
        field_name, order = resolve_sort(sort_by, sort_order)

        movies = self.search(snapshot, search)
        movies = self.filter_genre(movies, genre)
        return self.sort(movies, field_name, order)

    @staticmethod
    def search(movies: List[Movie], term: str) -> List[Movie]:
        """Case-insensitive substring match on title, director or any cast member."""
        needle = (term or "").strip().lower()
        if not needle:
            return list(movies)

        return [
            m for m in movies
            if needle in m.title.lower()
            or needle in m.director.lower()
            or any(needle in member.lower() for member in m.cast)
        ]

    @staticmethod
    def filter_genre(movies: List[Movie], genre: str) -> List[Movie]:
        """Keep movies tagged with the genre. Empty or "all" keeps everything."""
        if not genre or genre.lower() == "all":
            return list(movies)
        return [m for m in movies if genre in m.genre]

    @staticmethod
    def sort(movies: List[Movie], field_name: str, order: str) -> List[Movie]:
        """
        Sort by one field; equal keys stay in id-ascending order.

        Python's sort is stable (also with reverse=True), so ordering by id
        first makes the id tie-break hold in both directions.
        """
        key = SORT_FIELDS[field_name]
        ordered = sorted(movies, key=lambda m: m.id)
        ordered.sort(key=key, reverse=(order == "desc"))
        return ordered

    def _validate_page(self, page: int, page_size: int) -> Tuple[int, int]:
        if isinstance(page, bool) or not isinstance(page, int) or page < 1:
            raise ValidationError(f"Invalid page: {page}. Must be a positive integer")
        if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size < 1:
            raise ValidationError(f"Invalid pageSize: {page_size}. Must be a positive integer")

        if page_size > self.max_page_size:
            logger.warning(f"pageSize {page_size} exceeds maximum, clamping to {self.max_page_size}")
            page_size = self.max_page_size

        return page, page_size
