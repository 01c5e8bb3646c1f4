"""
Movie data model.

Represents a catalog movie, including the review aggregates derived from
its reviews.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from cineshelf.models.fields import as_float, as_int, as_str_list, lookup, record_str, record_str_list
from cineshelf.utils.errors import ValidationError
import config.settings as settings


@dataclass
class Movie:
    """
    A movie record in the catalog.

    review_count and average_review_rating are owned by the aggregate
    maintainer and only change when the movie's review set changes.
    """
    id: int
    title: str
    year: int
    genre: List[str] = field(default_factory=list)
    rating: float = 0.0  # Source-of-record score, 0-10
    director: str = ""
    runtime: int = 0  # Minutes
    synopsis: str = ""
    cast: List[str] = field(default_factory=list)
    poster_url: str = ""
    review_count: int = 0
    average_review_rating: float = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> "Movie":
        """Create Movie from a persisted JSON record."""
        return cls(
            id=int(data["id"]),
            title=record_str(data, "title"),
            year=int(data.get("year") or 0),
            genre=record_str_list(data, "genre"),
            rating=float(data.get("rating") or 0.0),
            director=record_str(data, "director"),
            runtime=int(data.get("runtime") or 0),
            synopsis=record_str(data, "synopsis", nullable=True),
            cast=record_str_list(data, "cast"),
            poster_url=record_str(data, "poster_url", nullable=True),
            review_count=int(lookup(data, "review_count", 0) or 0),
            average_review_rating=float(lookup(data, "average_review_rating", 0.0) or 0.0),
        )

    @classmethod
    def from_payload(cls, movie_id: int, payload: dict) -> "Movie":
        """
        Build a new movie from a client payload.

        Args:
            movie_id: Identifier assigned by the identity allocator
            payload: Client fields (camelCase or snake_case keys)

        Returns:
            Validated Movie with zeroed review aggregates

        Raises:
            ValidationError: If a required field is missing or out of range
        """
        year = lookup(payload, "year")
        runtime = lookup(payload, "runtime")
        if runtime is None:
            raise ValidationError("Missing required field: runtime")

        movie = cls(
            id=movie_id,
            title=str(lookup(payload, "title", "") or "").strip(),
            year=as_int(year, "year") if year is not None else datetime.now(timezone.utc).year,
            genre=as_str_list(lookup(payload, "genre"), "genre"),
            rating=as_float(lookup(payload, "rating", 0.0), "rating"),
            director=str(lookup(payload, "director", "") or "").strip(),
            runtime=as_int(runtime, "runtime"),
            synopsis=str(lookup(payload, "synopsis", "") or ""),
            cast=as_str_list(lookup(payload, "cast"), "cast"),
            poster_url=str(lookup(payload, "poster_url", "") or ""),
        )
        movie.validate()
        return movie

    def merged(self, payload: dict) -> "Movie":
        """
        Return a copy with the payload applied over this record.

        Protected fields (id and review aggregates) are ignored even when
        present in the payload.
        """
        changes: Dict[str, Any] = {}
        for name in ("title", "director", "synopsis", "poster_url"):
            value = lookup(payload, name)
            if value is not None:
                changes[name] = str(value).strip() if name in ("title", "director") else str(value)
        for name in ("genre", "cast"):
            value = lookup(payload, name)
            if value is not None:
                changes[name] = as_str_list(value, name)
        for name in ("year", "runtime"):
            value = lookup(payload, name)
            if value is not None:
                changes[name] = as_int(value, name)
        rating = lookup(payload, "rating")
        if rating is not None:
            changes["rating"] = as_float(rating, "rating")

        updated = replace(self, **changes)
        updated.validate()
        return updated

    def validate(self) -> None:
        """
        Check client-controlled fields.

        Raises:
            ValidationError: On the first offending field
        """
        if not self.title:
            raise ValidationError("Missing required field: title")
        if not self.director:
            raise ValidationError("Missing required field: director")
        if not self.genre:
            raise ValidationError("Missing required field: genre (at least one)")
        unknown = [g for g in self.genre if g not in settings.GENRES]
        if unknown:
            raise ValidationError(
                f"Invalid genre: {', '.join(unknown)}. Must be one of {', '.join(settings.GENRES)}"
            )
        if not (0 <= self.rating <= 10):
            raise ValidationError(f"Invalid rating: {self.rating}. Must be 0-10")
        if self.runtime <= 0:
            raise ValidationError(f"Invalid runtime: {self.runtime}. Must be a positive number of minutes")

    def to_dict(self) -> dict:
        """Convert to the persisted JSON record."""
        return {
            "id": self.id,
            "title": self.title,
            "year": self.year,
            "genre": list(self.genre),
            "rating": self.rating,
            "director": self.director,
            "runtime": self.runtime,
            "synopsis": self.synopsis,
            "cast": list(self.cast),
            "posterUrl": self.poster_url,
            "reviewCount": self.review_count,
            "averageReviewRating": self.average_review_rating,
        }


def find_movie(movies: List[Movie], movie_id: int) -> Optional[Movie]:
    """Return the movie with the given id, or None."""
    for movie in movies:
        if movie.id == movie_id:
            return movie
    return None
