"""Decoding of effect ``details`` payloads.

Payloads written before liquidity pools were introduced carry no
``asset_type`` on trustline sponsorship effects. Rather than re-ingesting
history, decoding classifies such payloads as legacy and fills the missing
field from the canonical asset string.
"""

from dataclasses import dataclass
from enum import Enum
import json
import logging
from typing import Any, Optional

from effectlog.lib.enums import EffectType
from effectlog.services.history.errors import DetailsDecodeError
from effectlog.services.history.models import Effect

logger = logging.getLogger(__name__)

# "CODE:ISSUER" with a 4 char code and a 56 char issuer is 61 chars
MAX_ALPHANUM4_CANONICAL_LEN = 61

ASSET_TYPE_BACKFILLED = frozenset({
    EffectType.TRUSTLINE_SPONSORSHIP_CREATED,
    EffectType.TRUSTLINE_SPONSORSHIP_UPDATED,
    EffectType.TRUSTLINE_SPONSORSHIP_REMOVED,
})


class PayloadVersion(str, Enum):
    LEGACY = 'legacy'
    CURRENT = 'current'


@dataclass(frozen=True)
class DecodedDetails:
    """Details payload tagged with the shape it was stored in."""
    effect_type: int
    version: PayloadVersion
    payload: dict[str, Any]


def asset_type_for_canonical_asset(canonical_asset: str) -> str:
    """Infer the credit asset type from its ``CODE:ISSUER`` form."""
    if len(canonical_asset) <= MAX_ALPHANUM4_CANONICAL_LEN:
        return 'credit_alphanum4'
    return 'credit_alphanum12'


def classify(effect_type: int, payload: dict[str, Any]) -> PayloadVersion:
    """Tell legacy payloads apart from current ones."""
    if effect_type in ASSET_TYPE_BACKFILLED and not payload.get('asset_type'):
        return PayloadVersion.LEGACY
    return PayloadVersion.CURRENT


def backfill(decoded: DecodedDetails) -> DecodedDetails:
    """Upgrade a decoded payload to the current shape.

    Pure and total: current payloads and kinds without a legacy shape are
    returned unchanged.
    """
    if decoded.version is PayloadVersion.CURRENT:
        return decoded

    payload = dict(decoded.payload)
    if decoded.effect_type in ASSET_TYPE_BACKFILLED:
        payload['asset_type'] = asset_type_for_canonical_asset(payload.get('asset', ''))
    return DecodedDetails(decoded.effect_type, PayloadVersion.CURRENT, payload)


def decode_details(effect: Effect) -> Optional[dict[str, Any]]:
    """Decode and backfill the details of ``effect``.

    Args:
        effect: Effect row whose ``details`` column holds JSON text.

    Returns:
        dict | None: The current-shape payload, or None if the row has no details.

    Raises:
        DetailsDecodeError: If the stored details are not a JSON object.
    """
    if effect.details is None:
        return None

    try:
        payload = json.loads(effect.details)
    except json.JSONDecodeError as e:
        raise DetailsDecodeError(f"unmarshal details of effect {effect.id} failed: {e}") from e
    if not isinstance(payload, dict):
        raise DetailsDecodeError(f"details of effect {effect.id} are not a JSON object")

    decoded = DecodedDetails(effect.type, classify(effect.type, payload), payload)
    if decoded.version is PayloadVersion.LEGACY:
        logger.debug(f"decode_details: backfilling legacy payload of effect {effect.id}")
    return backfill(decoded).payload
