"""
Error taxonomy for the catalog core.

Every failure the data-access layer reports is a CatalogError subclass so
callers (CLI, HTTP adapters) can map outcomes without string matching.
"""


class CatalogError(Exception):
    """Base class for all catalog errors."""


class NotFoundError(CatalogError):
    """An entity id is absent from its collection."""


class CollectionNotFoundError(NotFoundError):
    """No persisted collection exists yet. Callers treat this as empty."""


class UnauthorizedError(CatalogError):
    """Credential missing or invalid on a mutating call."""


class ValidationError(CatalogError, ValueError):
    """A payload field is missing or out of range."""


class CorruptDataError(CatalogError):
    """A persisted collection cannot be parsed or is not a list of records."""


class IOFailureError(CatalogError):
    """Writing to the durable medium failed."""
