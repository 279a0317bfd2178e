"""Base class for History handler mixins."""

from typing import TYPE_CHECKING, AsyncContextManager, Callable

if TYPE_CHECKING:
    import asyncpg


class HandlerMixin:
    """Base mixin providing access to History dependencies.

    The actual implementations of these attributes come from the History
    class, which inherits from ``DatabaseHandler`` alongside the mixins.

    Type hints are provided for IDE support.
    """

    # These are provided by History class
    pool: 'asyncpg.Pool'
    read_snapshot: Callable[[], AsyncContextManager['asyncpg.Connection']]
