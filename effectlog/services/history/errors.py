"""Exceptions raised while composing and running history queries."""

from typing import Any


class HistoryError(Exception):
    """Base class for history query failures."""


class InvalidOrder(HistoryError):
    """Paging order is neither ``asc`` nor ``desc``."""

    def __init__(self, order: Any):
        super().__init__(f"invalid paging order: {order!r}")
        self.order = order


class MalformedCursor(HistoryError):
    """Cursor is not two integers joined by the pair separator."""

    def __init__(self, cursor: str, reason: str = "expected two integers"):
        super().__init__(f"invalid cursor {cursor!r}: {reason}")
        self.cursor = cursor


class InvalidLimit(HistoryError):
    """Page limit outside ``1..MAX_PAGE_SIZE``."""

    def __init__(self, limit: Any, maximum: int):
        super().__init__(f"invalid limit {limit!r}: must be between 1 and {maximum}")
        self.limit = limit


class NotFound(HistoryError):
    """A filter referenced an entity that does not exist."""

    def __init__(self, entity: str, key: Any):
        super().__init__(f"{entity} {key!r} not found")
        self.entity = entity
        self.key = key


class LookupFailed(HistoryError):
    """Storage failed while resolving a filter's entity.

    The storage exception is chained as ``__cause__``.
    """

    def __init__(self, entity: str, key: Any):
        super().__init__(f"lookup of {entity} {key!r} failed")
        self.entity = entity
        self.key = key


class StorageError(HistoryError):
    """The composed query failed in storage."""


class DetailsDecodeError(HistoryError):
    """Stored effect details are not a JSON object."""
