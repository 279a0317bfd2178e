"""Paging tokens, pair cursors and page requests for history endpoints."""

from dataclasses import dataclass
import re

from effectlog.lib.enums import PageOrder
from effectlog.lib.toid import MAX_INT64
from effectlog.services.history.errors import InvalidLimit, InvalidOrder, MalformedCursor
from effectlog.services.history.utils.constants import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_PAIR_SEP,
    MAX_PAGE_SIZE,
)

_DIGITS = re.compile(r'[0-9]+')


def encode_paging_token(operation_id: int, order: int, sep: str = DEFAULT_PAIR_SEP) -> str:
    """Encode an effect position as a client-facing paging token.

    Args:
        operation_id: Composite operation key of the effect.
        order: Position of the effect within its operation.
        sep: Pair separator.

    Returns:
        Token of the form ``"<operation_id>-<order>"``.
    """
    return f"{operation_id}{sep}{order}"


def decode_int64_pair(token: str, sep: str = DEFAULT_PAIR_SEP) -> tuple[int, int]:
    """Decode a pair cursor into ``(major, minor)``.

    Args:
        token: Cursor received from the client.
        sep: Pair separator.

    Returns:
        Tuple of (major key, minor order).

    Raises:
        MalformedCursor: If the token is not two non-negative int64 values
            joined by ``sep``.
    """
    parts = token.split(sep, 1)
    if len(parts) != 2:
        raise MalformedCursor(token, f"missing separator {sep!r}")

    values = []
    for part in parts:
        if not _DIGITS.fullmatch(part):
            raise MalformedCursor(token)
        value = int(part)
        if value > MAX_INT64:
            raise MalformedCursor(token, "value overflows int64")
        values.append(value)
    return values[0], values[1]


def lexical_id(operation_id: int, order: int) -> str:
    """Zero-padded effect id whose string order matches numeric order."""
    return f"{operation_id:019d}-{order:010d}"


@dataclass(frozen=True)
class PageQuery:
    """Paging parameters for a single request.

    ``order`` is kept as the raw request string; the pagination engine
    rejects anything other than ``asc``/``desc`` when it is applied.
    """

    cursor: str = ''
    order: str = PageOrder.ASC.value
    limit: int = DEFAULT_PAGE_SIZE

    @classmethod
    def create(cls, cursor: str | None, order: str | None, limit: int | None) -> 'PageQuery':
        """Build a page from optional request parameters, applying defaults.

        Raises:
            InvalidLimit: If ``limit`` is not between 1 and ``MAX_PAGE_SIZE``.
        """
        if limit is None:
            limit = DEFAULT_PAGE_SIZE
        if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= MAX_PAGE_SIZE:
            raise InvalidLimit(limit, MAX_PAGE_SIZE)
        return cls(cursor=cursor or '', order=order or PageOrder.ASC.value, limit=limit)

    def cursor_int64_pair(self, sep: str = DEFAULT_PAIR_SEP) -> tuple[int, int]:
        """Decode the cursor, defaulting to the start of the scan direction.

        An empty cursor means "from the beginning": ``(0, 0)`` ascending and
        ``(MAX_INT64, MAX_INT64)`` descending.

        Raises:
            InvalidOrder: If the cursor is empty and the order is unknown.
            MalformedCursor: If the cursor cannot be decoded.
        """
        if not self.cursor:
            if self.order == PageOrder.ASC.value:
                return 0, 0
            if self.order == PageOrder.DESC.value:
                return MAX_INT64, MAX_INT64
            raise InvalidOrder(self.order)
        return decode_int64_pair(self.cursor, sep)
