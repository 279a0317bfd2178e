"""Row models for the ``history_effects`` table."""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from effectlog.lib import toid
from effectlog.services.history.utils.pagination import encode_paging_token, lexical_id


class Effect(BaseModel):
    """One effect row joined with its account address."""

    model_config = ConfigDict(frozen=True, extra='ignore')

    history_account_id: int
    address: Optional[str] = None
    history_operation_id: int
    order: int
    type: int
    details: Optional[str] = None

    @property
    def id(self) -> str:
        """Lexically ordered id for this effect."""
        return lexical_id(self.history_operation_id, self.order)

    @property
    def paging_token(self) -> str:
        """Cursor that resumes a listing right after this effect."""
        return encode_paging_token(self.history_operation_id, self.order)

    @property
    def ledger_sequence(self) -> int:
        """Ledger in which the effect occurred."""
        return toid.parse(self.history_operation_id).ledger_sequence
