"""Total order ID codec for ledger operations.

A total order ID packs ``(ledger_sequence, transaction_order,
operation_order)`` into a single signed 64-bit integer so that integer
comparison matches chronological order::

    |    32 bits     |    20 bits    | 12 bits  |
    | ledger_sequence | tx order      | op order |
"""

from __future__ import annotations

from dataclasses import dataclass, replace

LEDGER_BITS = 32
TRANSACTION_BITS = 20
OPERATION_BITS = 12

LEDGER_MASK = (1 << LEDGER_BITS) - 1
TRANSACTION_MASK = (1 << TRANSACTION_BITS) - 1
OPERATION_MASK = (1 << OPERATION_BITS) - 1

LEDGER_SHIFT = TRANSACTION_BITS + OPERATION_BITS
TRANSACTION_SHIFT = OPERATION_BITS
OPERATION_SHIFT = 0

MAX_INT32 = (1 << 31) - 1
MAX_INT64 = (1 << 63) - 1


class InvalidTOID(ValueError):
    """Raised when a component does not fit in its bit field."""


@dataclass(frozen=True)
class TOID:
    """Decoded total order ID."""

    ledger_sequence: int
    transaction_order: int = 0
    operation_order: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.ledger_sequence <= MAX_INT32:
            raise InvalidTOID(f"ledger sequence out of range: {self.ledger_sequence}")
        if not 0 <= self.transaction_order <= TRANSACTION_MASK:
            raise InvalidTOID(f"transaction order out of range: {self.transaction_order}")
        if not 0 <= self.operation_order <= OPERATION_MASK:
            raise InvalidTOID(f"operation order out of range: {self.operation_order}")

    def to_int(self) -> int:
        """Pack the components into the 64-bit key."""
        return (
            (self.ledger_sequence << LEDGER_SHIFT)
            | (self.transaction_order << TRANSACTION_SHIFT)
            | (self.operation_order << OPERATION_SHIFT)
        )

    def inc_operation_order(self) -> TOID:
        """Return the ID of the next operation, carrying into the transaction."""
        if self.operation_order == OPERATION_MASK:
            return replace(self, operation_order=0).inc_transaction_order()
        return replace(self, operation_order=self.operation_order + 1)

    def inc_transaction_order(self) -> TOID:
        """Return the ID of the first operation of the next transaction.

        The operation order is reset to 0 so the result is the exclusive upper
        bound of every operation in this transaction.
        """
        if self.transaction_order == TRANSACTION_MASK:
            return TOID(self.ledger_sequence + 1)
        return TOID(self.ledger_sequence, self.transaction_order + 1)


def new(ledger_sequence: int, transaction_order: int = 0, operation_order: int = 0) -> TOID:
    """Build a TOID from its components."""
    return TOID(ledger_sequence, transaction_order, operation_order)


def parse(value: int) -> TOID:
    """Split a packed 64-bit key into its components.

    Args:
        value: Packed key as stored in ``history_operation_id``.

    Returns:
        TOID: The decoded ID.

    Raises:
        InvalidTOID: If ``value`` is negative or wider than 63 bits.
    """
    if not 0 <= value <= MAX_INT64:
        raise InvalidTOID(f"not a valid total order id: {value}")
    return TOID(
        ledger_sequence=(value >> LEDGER_SHIFT) & LEDGER_MASK,
        transaction_order=(value >> TRANSACTION_SHIFT) & TRANSACTION_MASK,
        operation_order=(value >> OPERATION_SHIFT) & OPERATION_MASK,
    )


def ledger_start(ledger_sequence: int) -> int:
    """First key belonging to ``ledger_sequence``."""
    return TOID(ledger_sequence).to_int()
