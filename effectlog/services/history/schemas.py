"""
History-specific Pydantic schemas for API responses.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from effectlog.lib.enums import PageOrder, effect_type_name
from effectlog.services.history.details import decode_details
from effectlog.services.history.models import Effect


# Single effect as returned to clients
class EffectItem(BaseModel):
    """One effect with its derived identifiers."""
    id: str = Field(..., description="Lexically ordered effect id")
    paging_token: str = Field(..., description="Cursor resuming right after this effect")
    account: Optional[str] = None
    type: str
    type_i: int
    ledger: int
    operation_id: str
    details: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_effect(cls, effect: Effect) -> 'EffectItem':
        return cls(
            id=effect.id,
            paging_token=effect.paging_token,
            account=effect.address,
            type=effect_type_name(effect.type),
            type_i=effect.type,
            ledger=effect.ledger_sequence,
            operation_id=str(effect.history_operation_id),
            details=decode_details(effect) or {},
        )


# Effects page
class EffectsPage(BaseModel):
    """A page of effects with the cursor for the next page.

    ``next_cursor`` is the paging token of the last item; pass it back as
    ``cursor`` to continue in the same order.
    """
    items: List[EffectItem]
    limit: int
    order: PageOrder
    next_cursor: Optional[str] = None
