"""Effect history service."""

from effectlog.services.history.core import History

__all__ = ['History']
