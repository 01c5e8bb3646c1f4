"""
Catalog Service.

Coordinates the store, cache, identity allocator, credential gate, query
engine and aggregator behind the catalog operations.
"""

import logging
from typing import List, Optional

from cineshelf.agents.aggregation import ReviewAggregator
from cineshelf.agents.export import CsvExporter
from cineshelf.agents.query_engine import QueryEngine
from cineshelf.models.movie import Movie, find_movie
from cineshelf.models.query import QuerySpec
from cineshelf.models.review import Review
from cineshelf.registry.collection_cache import CollectionCache
from cineshelf.registry.identity import IdentityAllocator
from cineshelf.utils.auth import CredentialGate
from cineshelf.utils.errors import NotFoundError
from cineshelf.utils.storage import DurableStore
import config.settings as settings

logger = logging.getLogger(__name__)

MOVIES = "movies"
REVIEWS = "reviews"


class CatalogService:
    """
    Entry point for every catalog operation.

    Construct once per process and share it between request handlers.
    Mutations follow: credential check -> locked read-modify-write ->
    durable save -> cache update -> (reviews) aggregate recompute.
    """

    def __init__(
        self,
        data_root: str = str(settings.DATA_ROOT),
        admin_password: str = settings.ADMIN_PASSWORD,
        max_page_size: int = settings.MAX_PAGE_SIZE
    ):
        """
        Initialize catalog service.

        Args:
            data_root: Directory holding the collection files
            admin_password: Shared secret for the credential gate
            max_page_size: Upper bound applied to listing page sizes
        """
        logger.info("Initializing catalog components...")

        self.store = DurableStore(data_root)
        self.cache = CollectionCache(self.store)
        self.identity = IdentityAllocator(self.store)
        self.gate = CredentialGate(admin_password)
        self.query_engine = QueryEngine(max_page_size=max_page_size)
        self.aggregator = ReviewAggregator()
        self.exporter = CsvExporter()

        logger.info("Catalog service ready")

    def __enter__(self) -> "CatalogService":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Release the in-memory snapshots."""
        self.cache.clear()
        logger.info("Catalog service closed")

    # Movies

    def list_movies(
        self,
        search: str = "",
        genre: str = "",
        sort_by: str = settings.DEFAULT_SORT_BY,
        sort_order: str = settings.DEFAULT_SORT_ORDER,
        page: int = 1,
        page_size: int = settings.DEFAULT_PAGE_SIZE
    ) -> dict:
        """
        List movies matching a query.

        Returns:
            Dict with data, total, page, pageSize and totalPages
        """
        spec = QuerySpec(
            search=search,
            genre=genre,
            sort_by=sort_by,
            sort_order=sort_order,
            page=page,
            page_size=page_size,
        )
        movies = self.cache.get(MOVIES)
        result = self.query_engine.query(movies, spec)

        logger.info(f"Listed movies: {result.total} matches, returning page {result.page_number}")
        return result.to_dict()

    def get_movie(self, movie_id: int) -> Movie:
        """
        Raises:
            NotFoundError: If no movie has this id
        """
        movie = find_movie(self.cache.get(MOVIES), movie_id)
        if movie is None:
            logger.warning(f"A non-existent movie ID was requested: {movie_id}")
            raise NotFoundError(f"Movie not found: {movie_id}")
        return movie

    def create_movie(self, payload: dict, credential: Optional[str]) -> Movie:
        """
        Create a movie with a server-assigned id and zeroed review aggregates.

        Raises:
            UnauthorizedError: If the credential is missing or invalid
            ValidationError: If title, director or genre is missing or invalid
            IOFailureError: If the collection could not be saved
        """
        self.gate.require(credential, "create a movie")

        with self.cache.locked(MOVIES):
            movies = self.cache.get(MOVIES, strict=True)
            # Validate before allocating so rejected payloads don't burn ids
            Movie.from_payload(self.identity.peek(MOVIES, movies), payload)
            movie = Movie.from_payload(self.identity.next(MOVIES, movies), payload)

            movies.append(movie)
            self.cache.commit(MOVIES, movies)

        logger.info(f"A new movie has been added: ID {movie.id}, {movie.title}")
        return movie

    def update_movie(self, movie_id: int, payload: dict, credential: Optional[str]) -> Movie:
        """
        Merge the payload over a stored movie. id and review aggregates are preserved.

        Raises:
            UnauthorizedError: If the credential is missing or invalid
            NotFoundError: If no movie has this id
            ValidationError: If the merged record is invalid
            IOFailureError: If the collection could not be saved
        """
        self.gate.require(credential, "update a movie")

        with self.cache.locked(MOVIES):
            movies = self.cache.get(MOVIES, strict=True)
            index = self._index_of(movies, movie_id)
            if index is None:
                logger.warning(f"Attempt to update a non-existent movie ID {movie_id}")
                raise NotFoundError(f"Movie not found: {movie_id}")

            updated = movies[index].merged(payload)
            movies[index] = updated
            self.cache.commit(MOVIES, movies)

        logger.info(f"Updated movie ID {movie_id}: {updated.title}")
        return updated

    def delete_movie(self, movie_id: int, credential: Optional[str]) -> None:
        """
        Delete a movie. Its reviews are kept as orphans.

        Raises:
            UnauthorizedError: If the credential is missing or invalid
            NotFoundError: If no movie has this id
            IOFailureError: If the collection could not be saved
        """
        self.gate.require(credential, "delete a movie")

        with self.cache.locked(MOVIES):
            movies = self.cache.get(MOVIES, strict=True)
            remaining = [m for m in movies if m.id != movie_id]
            if len(remaining) == len(movies):
                logger.warning(f"Attempt to delete a non-existent movie ID {movie_id}")
                raise NotFoundError(f"Movie not found: {movie_id}")

            self.identity.observe(MOVIES, movies)
            self.cache.commit(MOVIES, remaining)

        logger.info(f"Deleted movie ID {movie_id}")

    # Reviews

    def list_reviews(self, movie_id: Optional[int] = None) -> List[Review]:
        """Reviews (optionally for one movie), newest first."""
        reviews = self.cache.get(REVIEWS)
        if movie_id is not None:
            reviews = [r for r in reviews if r.movie_id == movie_id]

        reviews.sort(key=lambda r: (r.created_time, r.id), reverse=True)
        return reviews

    def get_review(self, review_id: int) -> Review:
        """
        Raises:
            NotFoundError: If no review has this id
        """
        for review in self.cache.get(REVIEWS):
            if review.id == review_id:
                return review
        raise NotFoundError(f"Review not found: {review_id}")

    def create_review(self, payload: dict) -> Review:
        """
        Create a review and recompute the referenced movie's aggregates.

        The movie id is not checked; a review for an unknown movie is stored
        and no aggregates change.

        Raises:
            ValidationError: If the payload is invalid
            IOFailureError: If either collection could not be saved
        """
        with self.cache.locked(MOVIES, REVIEWS):
            reviews = self.cache.get(REVIEWS, strict=True)
            movies = self.cache.get(MOVIES, strict=True)
            Review.from_payload(self.identity.peek(REVIEWS, reviews), payload)
            review = Review.from_payload(self.identity.next(REVIEWS, reviews), payload)

            reviews.append(review)
            self.cache.commit(REVIEWS, reviews)
            logger.info(f"A new review has been added: ID {review.id} for movie {review.movie_id}")

            movie = find_movie(movies, review.movie_id)
            if movie is None:
                logger.warning(f"Review {review.id} references unknown movie {review.movie_id}, no aggregates updated")
            else:
                self.aggregator.apply(movie, reviews)
                self.cache.commit(MOVIES, movies)

        return review

    # Export

    def export_csv(
        self,
        credential: Optional[str],
        genre: str = "",
        sort_by: str = settings.DEFAULT_SORT_BY,
        sort_order: str = settings.DEFAULT_SORT_ORDER,
        search: str = ""
    ) -> str:
        """
        Export the filtered, sorted catalog (no pagination) as CSV text.

        Raises:
            UnauthorizedError: If the credential is missing or invalid
        """
        self.gate.require(credential, "export the catalog")

        movies = self.query_engine.select(self.cache.get(MOVIES), search, genre, sort_by, sort_order)
        return self.exporter.generate(movies)

    @staticmethod
    def _index_of(movies: List[Movie], movie_id: int) -> Optional[int]:
        for index, movie in enumerate(movies):
            if movie.id == movie_id:
                return index
        return None
