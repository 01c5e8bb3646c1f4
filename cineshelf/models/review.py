"""
Review data model.

Represents a user review attached to a movie by movie_id.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from cineshelf.models.fields import as_int, lookup, record_str
from cineshelf.utils.errors import ValidationError
import config.settings as settings


def utc_timestamp() -> str:
    """Current time as ISO-8601 UTC with millisecond precision (e.g. 2024-06-01T12:00:00.000Z)."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Accepts a "Z" suffix or a numeric offset, with or without fractional
    seconds. Timestamps without an offset are taken as UTC; an empty value
    sorts before every real timestamp.

    Raises:
        ValueError: If the value is not ISO-8601
    """
    if not value:
        return datetime.min.replace(tzinfo=timezone.utc)

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    date_part, sep, time_part = text.partition("T")
    if sep:
        # fromisoformat before 3.11 only takes 3 or 6 fractional digits
        match = re.match(r"^(\d{2}:\d{2}:\d{2})\.(\d+)(.*)$", time_part)
        if match:
            clock, fraction, offset = match.groups()
            time_part = f"{clock}.{fraction[:6].ljust(6, '0')}{offset}"
        text = f"{date_part}T{time_part}"

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass
class Review:
    """
    A user review.
    movie_id is not checked against the movie collection; orphans are kept.
    """
    id: int
    movie_id: int
    user_name: str
    rating: int  # 1-5 stars
    review_text: str = ""
    created_at: str = ""  # ISO-8601, set server-side

    @classmethod
    def from_dict(cls, data: dict) -> "Review":
        """Create Review from a persisted JSON record."""
        created_at = record_str(data, "created_at", nullable=True)
        parse_timestamp(created_at)

        return cls(
            id=int(data["id"]),
            movie_id=int(lookup(data, "movie_id")),
            user_name=record_str(data, "user_name", nullable=True),
            rating=int(data.get("rating") or 0),
            review_text=record_str(data, "review_text", nullable=True),
            created_at=created_at,
        )

    @classmethod
    def from_payload(cls, review_id: int, payload: dict, created_at: Optional[str] = None) -> "Review":
        """
        Build a new review from a client payload.

        Args:
            review_id: Identifier assigned by the identity allocator
            payload: Client fields (movieId, userName, rating, reviewText)
            created_at: Override for the server timestamp (defaults to now)

        Raises:
            ValidationError: If a field is missing or the rating is out of range
        """
        movie_id = lookup(payload, "movie_id")
        if movie_id is None:
            raise ValidationError("Missing required field: movieId")
        rating = lookup(payload, "rating")
        if rating is None:
            raise ValidationError("Missing required field: rating")

        review = cls(
            id=review_id,
            movie_id=as_int(movie_id, "movieId"),
            user_name=str(lookup(payload, "user_name", "") or "").strip(),
            rating=as_int(rating, "rating"),
            review_text=str(lookup(payload, "review_text", "") or "").strip(),
            created_at=created_at or utc_timestamp(),
        )
        review.validate()
        return review

    @property
    def created_time(self) -> datetime:
        return parse_timestamp(self.created_at)

    def validate(self) -> None:
        if not self.user_name:
            raise ValidationError("Missing required field: userName")
        if not self.review_text:
            raise ValidationError("Missing required field: reviewText")
        if not (settings.MIN_REVIEW_RATING <= self.rating <= settings.MAX_REVIEW_RATING):
            raise ValidationError(
                f"Invalid rating: {self.rating}. "
                f"Must be {settings.MIN_REVIEW_RATING}-{settings.MAX_REVIEW_RATING}"
            )

    def to_dict(self) -> dict:
        """Convert to the persisted JSON record."""
        return {
            "id": self.id,
            "movieId": self.movie_id,
            "userName": self.user_name,
            "rating": self.rating,
            "reviewText": self.review_text,
            "createdAt": self.created_at,
        }
