"""History handler mixins package.

- EffectHandlersMixin: effect listings by account, ledger, operation,
  transaction and liquidity pool
"""

from effectlog.services.history.handlers.effects import EffectHandlersMixin

__all__ = [
    'EffectHandlersMixin',
]
