"""History utility modules."""

from effectlog.services.history.utils.pagination import (
    PageQuery,
    decode_int64_pair,
    encode_paging_token,
    lexical_id,
)
from effectlog.services.history.utils.query_builder import Predicate, SelectSpec

__all__ = [
    'PageQuery',
    'decode_int64_pair',
    'encode_paging_token',
    'lexical_id',
    'Predicate',
    'SelectSpec',
]
