"""
Unit tests for the review aggregator.
"""

import pytest

from cineshelf.agents.aggregation import ReviewAggregate, ReviewAggregator
from cineshelf.models.movie import Movie
from cineshelf.models.review import Review


def review(review_id, movie_id, rating):
    return Review(id=review_id, movie_id=movie_id, user_name="ana", rating=rating, review_text="ok")


def test_no_reviews_gives_zero():
    """Average is exactly 0 when there are no reviews (not NaN, not None)."""
    aggregate = ReviewAggregator().recompute(1, [])

    assert aggregate == ReviewAggregate(count=0, average=0.0)


def test_mean_of_matching_reviews():
    reviews = [review(1, 1, 4), review(2, 1, 5), review(3, 1, 3)]

    aggregate = ReviewAggregator().recompute(1, reviews)

    assert aggregate.count == 3
    assert aggregate.average == 4.0


def test_fourth_review_updates_average():
    reviews = [review(1, 1, 4), review(2, 1, 5), review(3, 1, 3), review(4, 1, 2)]

    aggregate = ReviewAggregator().recompute(1, reviews)

    assert aggregate.count == 4
    assert aggregate.average == 3.5


def test_other_movies_are_ignored():
    reviews = [review(1, 1, 5), review(2, 2, 1), review(3, 2, 1)]

    aggregate = ReviewAggregator().recompute(1, reviews)

    assert aggregate == ReviewAggregate(count=1, average=5.0)


def test_apply_writes_onto_movie():
    movie = Movie(id=7, title="Heat", year=1995, genre=["Crime"], director="Michael Mann")
    reviews = [review(1, 7, 2), review(2, 7, 3)]

    result = ReviewAggregator().apply(movie, reviews)

    assert result is movie
    assert movie.review_count == 2
    assert movie.average_review_rating == pytest.approx(2.5)


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
