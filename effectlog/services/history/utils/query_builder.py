"""Immutable SELECT specifications rendered to asyncpg parameter SQL."""

from dataclasses import dataclass, replace
import itertools
import re
from typing import Any, Iterable, Optional

_PLACEHOLDER = re.compile(r'\?')


@dataclass(frozen=True)
class Predicate:
    """A WHERE fragment with ``?`` placeholders and its bound values.

    Usage:
        Predicate("heff.history_account_id = ?", (42,))
    """

    sql: str
    params: tuple = ()

    def __post_init__(self) -> None:
        placeholders = len(_PLACEHOLDER.findall(self.sql))
        if placeholders != len(self.params):
            raise ValueError(
                f"predicate has {placeholders} placeholders but {len(self.params)} params: {self.sql}"
            )

    @classmethod
    def eq(cls, column: str, value: Any) -> 'Predicate':
        return cls(f"{column} = ?", (value,))

    @classmethod
    def key_range(cls, column: str, start: int, end: int) -> 'Predicate':
        """Half-open range ``start <= column < end``."""
        return cls(f"{column} >= ? AND {column} < ?", (start, end))

    @classmethod
    def is_in(cls, column: str, values: Iterable[Any]) -> 'Predicate':
        """Membership test; an empty set matches nothing."""
        values = tuple(values)
        if not values:
            return cls("FALSE")
        placeholders = ', '.join('?' for _ in values)
        return cls(f"{column} IN ({placeholders})", values)


@dataclass(frozen=True)
class SelectSpec:
    """A SELECT statement as a value.

    Every builder method returns a new spec and leaves the receiver
    untouched, so a base spec can be shared between requests.

    Usage:
        spec = (
            SelectSpec(columns=("heff.*",), from_="history_effects heff")
            .where(Predicate.eq("heff.history_account_id", 7))
            .order_by("heff.history_operation_id asc")
            .with_limit(10)
        )
        query, params = spec.render()
        rows = await conn.fetch(query, *params)
    """

    columns: tuple[str, ...]
    from_: str
    joins: tuple[str, ...] = ()
    predicates: tuple[Predicate, ...] = ()
    ordering: tuple[str, ...] = ()
    limit: Optional[int] = None

    def where(self, predicate: Predicate) -> 'SelectSpec':
        return replace(self, predicates=self.predicates + (predicate,))

    def join(self, clause: str) -> 'SelectSpec':
        return replace(self, joins=self.joins + (clause,))

    def order_by(self, *terms: str) -> 'SelectSpec':
        return replace(self, ordering=self.ordering + terms)

    def with_limit(self, limit: int) -> 'SelectSpec':
        return replace(self, limit=limit)

    def render(self, start_idx: int = 1) -> tuple[str, list[Any]]:
        """Render the statement, numbering placeholders from ``$start_idx``.

        Args:
            start_idx: Number of the first positional parameter.

        Returns:
            Tuple of (SQL text, positional parameters).
        """
        params: list[Any] = []
        counter = itertools.count(start_idx)

        def number(fragment: str) -> str:
            return _PLACEHOLDER.sub(lambda _match: f"${next(counter)}", fragment)

        parts = [f"SELECT {', '.join(self.columns)}", f"FROM {self.from_}"]
        parts.extend(self.joins)
        if self.predicates:
            clauses = []
            for predicate in self.predicates:
                clauses.append(f"({number(predicate.sql)})")
                params.extend(predicate.params)
            parts.append("WHERE " + " AND ".join(clauses))
        if self.ordering:
            parts.append("ORDER BY " + ", ".join(self.ordering))
        if self.limit is not None:
            parts.append(f"LIMIT {number('?')}")
            params.append(self.limit)
        return "\n".join(parts), params
