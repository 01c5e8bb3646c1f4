"""
Payload field helpers shared by the data models.

Records on disk use camelCase keys; Python attributes are snake_case.
Client payloads may use either spelling.
"""

from typing import Any, Dict, List

from cineshelf.utils.errors import ValidationError

# Python attribute -> on-disk key
DISK_KEYS = {
    "poster_url": "posterUrl",
    "review_count": "reviewCount",
    "average_review_rating": "averageReviewRating",
    "movie_id": "movieId",
    "user_name": "userName",
    "review_text": "reviewText",
    "created_at": "createdAt",
}


def lookup(data: Dict[str, Any], name: str, default: Any = None) -> Any:
    """Read an attribute from a record by camelCase key, falling back to snake_case."""
    disk_key = DISK_KEYS.get(name, name)
    if disk_key in data:
        return data[disk_key]
    return data.get(name, default)


def as_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {name}: {value!r}. Must be an integer")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {name}: {value!r}. Must be an integer")
    if not number.is_integer():
        raise ValidationError(f"Invalid {name}: {value!r}. Must be an integer")
    return int(number)


def as_float(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {name}: {value!r}. Must be a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {name}: {value!r}. Must be a number")


def as_str_list(value: Any, name: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        # "Drama, Crime" style input from forms and the CLI
        return [part.strip() for part in value.split(",") if part.strip()]
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f"Invalid {name}: {value!r}. Must be a list of strings")
    return [str(item) for item in value]


def record_str(data: Dict[str, Any], name: str, nullable: bool = False) -> str:
    """
    Read a text attribute from a persisted record.

    A missing key reads as "". Null is accepted only for nullable fields.

    Raises:
        ValueError: If the stored value is not a string
    """
    value = lookup(data, name, "")
    if value is None and nullable:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string, got {type(value).__name__}")
    return value


def record_str_list(data: Dict[str, Any], name: str) -> List[str]:
    """
    Read a list-of-text attribute from a persisted record.

    Raises:
        ValueError: If the stored value is not a list of strings
    """
    value = lookup(data, name)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"{name} must be a list of strings")
    return list(value)
