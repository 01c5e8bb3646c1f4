"""
Review Aggregator.

Recomputes a movie's review count and average review rating from its
current review set.
"""

import logging
from dataclasses import dataclass
from typing import List

from cineshelf.models.movie import Movie
from cineshelf.models.review import Review

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReviewAggregate:
    count: int
    average: float


class ReviewAggregator:
    """
    Keeps derived review fields consistent with the review collection.
    """

    def recompute(self, movie_id: int, reviews: List[Review]) -> ReviewAggregate:
        """
        Aggregate the reviews that reference one movie.

        Args:
            movie_id: Movie whose reviews are counted
            reviews: Full review collection (other movies' reviews are ignored)

        Returns:
            ReviewAggregate with the count and mean rating (0.0 when there are none)
        """
        ratings = [review.rating for review in reviews if review.movie_id == movie_id]

        if not ratings:
            return ReviewAggregate(count=0, average=0.0)

        return ReviewAggregate(count=len(ratings), average=sum(ratings) / len(ratings))

    def apply(self, movie: Movie, reviews: List[Review]) -> Movie:
        """
        Write the recomputed aggregates onto a movie in place.

        Returns:
            The same movie, for chaining
        """
        aggregate = self.recompute(movie.id, reviews)
        movie.review_count = aggregate.count
        movie.average_review_rating = aggregate.average

        logger.info(
            f"Recomputed aggregates for movie {movie.id}: "
            f"{aggregate.count} reviews, average {aggregate.average:.2f}"
        )
        return movie
