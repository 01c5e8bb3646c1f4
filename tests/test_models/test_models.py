"""
Unit tests for the movie and review models.
"""

import pytest

from cineshelf.models.movie import Movie, find_movie
from cineshelf.models.review import Review
from cineshelf.utils.errors import ValidationError


def valid_payload(**overrides):
    payload = {
        "title": "Heat",
        "year": 1995,
        "genre": ["Crime", "Thriller"],
        "rating": 8.3,
        "director": "Michael Mann",
        "runtime": 170,
        "synopsis": "A group of professional bank robbers...",
        "cast": ["Al Pacino", "Robert De Niro"],
        "posterUrl": "https://example.com/heat.jpg",
    }
    payload.update(overrides)
    return payload


def test_movie_from_payload():
    movie = Movie.from_payload(1, valid_payload())

    assert movie.id == 1
    assert movie.poster_url == "https://example.com/heat.jpg"
    assert movie.review_count == 0
    assert movie.average_review_rating == 0.0


def test_movie_payload_cannot_set_aggregates():
    movie = Movie.from_payload(1, valid_payload(id=99, reviewCount=12, averageReviewRating=4.9))

    assert movie.id == 1
    assert movie.review_count == 0
    assert movie.average_review_rating == 0.0


@pytest.mark.parametrize("field_name", ["title", "director", "genre", "runtime"])
def test_movie_required_fields(field_name):
    payload = valid_payload()
    del payload[field_name]

    with pytest.raises(ValidationError, match=field_name):
        Movie.from_payload(1, payload)


def test_movie_empty_genre_list_rejected():
    with pytest.raises(ValidationError, match="genre"):
        Movie.from_payload(1, valid_payload(genre=[]))


def test_movie_unknown_genre_rejected():
    with pytest.raises(ValidationError, match="Western"):
        Movie.from_payload(1, valid_payload(genre=["Western"]))


@pytest.mark.parametrize("overrides", [{"rating": 11}, {"rating": -1}, {"runtime": -5}, {"runtime": 0}, {"year": "soon"}])
def test_movie_out_of_range_values(overrides):
    with pytest.raises(ValidationError):
        Movie.from_payload(1, valid_payload(**overrides))


def test_movie_genre_from_comma_string():
    movie = Movie.from_payload(1, valid_payload(genre="Crime, Drama"))

    assert movie.genre == ["Crime", "Drama"]


def test_movie_merged_preserves_protected_fields():
    movie = Movie.from_payload(4, valid_payload())
    movie.review_count = 3
    movie.average_review_rating = 4.0

    updated = movie.merged({"id": 50, "title": "Heat (1995)", "reviewCount": 0, "averageReviewRating": 1.0})

    assert updated.id == 4
    assert updated.title == "Heat (1995)"
    assert updated.review_count == 3
    assert updated.average_review_rating == 4.0
    assert updated.director == "Michael Mann"
    assert movie.title == "Heat"  # original untouched


def test_movie_merged_validates():
    movie = Movie.from_payload(4, valid_payload())

    with pytest.raises(ValidationError):
        movie.merged({"title": ""})


def test_movie_disk_round_trip():
    movie = Movie.from_payload(2, valid_payload())
    record = movie.to_dict()

    assert record["posterUrl"] == movie.poster_url
    assert record["reviewCount"] == 0
    assert Movie.from_dict(record) == movie


def test_find_movie():
    movies = [Movie.from_payload(1, valid_payload()), Movie.from_payload(2, valid_payload(title="Thief"))]

    assert find_movie(movies, 2).title == "Thief"
    assert find_movie(movies, 3) is None


def test_review_from_payload():
    review = Review.from_payload(1, {"movieId": 3, "userName": "ana", "rating": 4, "reviewText": "Great"})

    assert review.movie_id == 3
    assert review.created_at.endswith("Z")
    assert review.to_dict()["createdAt"] == review.created_at


@pytest.mark.parametrize("rating", [0, 6, 4.5, "many"])
def test_review_rating_range(rating):
    with pytest.raises(ValidationError):
        Review.from_payload(1, {"movieId": 3, "userName": "ana", "rating": rating, "reviewText": "x"})


@pytest.mark.parametrize("missing", ["movieId", "userName", "rating", "reviewText"])
def test_review_required_fields(missing):
    payload = {"movieId": 3, "userName": "ana", "rating": 4, "reviewText": "Great"}
    del payload[missing]

    with pytest.raises(ValidationError):
        Review.from_payload(1, payload)


def test_review_disk_round_trip():
    review = Review.from_payload(5, {"movie_id": 1, "user_name": "bo", "rating": 2, "review_text": "Meh"},
                                 created_at="2024-06-01T10:00:00.000Z")

    assert Review.from_dict(review.to_dict()) == review


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
