"""Enum definitions shared by the history service."""
from __future__ import annotations
from enum import Enum, IntEnum

class PageOrder(str, Enum):
    ASC = 'asc'
    DESC = 'desc'

class EffectType(IntEnum):
    ACCOUNT_CREATED = 0
    ACCOUNT_REMOVED = 1
    ACCOUNT_CREDITED = 2
    ACCOUNT_DEBITED = 3
    ACCOUNT_THRESHOLDS_UPDATED = 4
    ACCOUNT_HOME_DOMAIN_UPDATED = 5
    ACCOUNT_FLAGS_UPDATED = 6
    ACCOUNT_INFLATION_DESTINATION_UPDATED = 7
    SIGNER_CREATED = 10
    SIGNER_REMOVED = 11
    SIGNER_UPDATED = 12
    TRUSTLINE_CREATED = 20
    TRUSTLINE_REMOVED = 21
    TRUSTLINE_UPDATED = 22
    TRUSTLINE_AUTHORIZED = 23
    TRUSTLINE_DEAUTHORIZED = 24
    TRUSTLINE_AUTHORIZED_TO_MAINTAIN_LIABILITIES = 25
    TRUSTLINE_FLAGS_UPDATED = 26
    OFFER_CREATED = 30
    OFFER_REMOVED = 31
    OFFER_UPDATED = 32
    TRADE = 33
    DATA_CREATED = 40
    DATA_REMOVED = 41
    DATA_UPDATED = 42
    SEQUENCE_BUMPED = 43
    CLAIMABLE_BALANCE_CREATED = 50
    CLAIMABLE_BALANCE_CLAIMANT_CREATED = 51
    CLAIMABLE_BALANCE_CLAIMED = 52
    ACCOUNT_SPONSORSHIP_CREATED = 60
    ACCOUNT_SPONSORSHIP_UPDATED = 61
    ACCOUNT_SPONSORSHIP_REMOVED = 62
    TRUSTLINE_SPONSORSHIP_CREATED = 63
    TRUSTLINE_SPONSORSHIP_UPDATED = 64
    TRUSTLINE_SPONSORSHIP_REMOVED = 65
    DATA_SPONSORSHIP_CREATED = 66
    DATA_SPONSORSHIP_UPDATED = 67
    DATA_SPONSORSHIP_REMOVED = 68
    CLAIMABLE_BALANCE_SPONSORSHIP_CREATED = 69
    CLAIMABLE_BALANCE_SPONSORSHIP_UPDATED = 70
    CLAIMABLE_BALANCE_SPONSORSHIP_REMOVED = 71
    SIGNER_SPONSORSHIP_CREATED = 72
    SIGNER_SPONSORSHIP_UPDATED = 73
    SIGNER_SPONSORSHIP_REMOVED = 74
    CLAIMABLE_BALANCE_CLAWED_BACK = 80
    LIQUIDITY_POOL_DEPOSITED = 90
    LIQUIDITY_POOL_WITHDREW = 91
    LIQUIDITY_POOL_TRADE = 92
    LIQUIDITY_POOL_CREATED = 93
    LIQUIDITY_POOL_REMOVED = 94
    LIQUIDITY_POOL_REVOKED = 95

EFFECT_TYPE_NAMES = {e.value: e.name.lower() for e in EffectType}


def effect_type_name(code: int) -> str:
    """Return the wire name for an effect type code, ``unknown`` if unmapped."""
    return EFFECT_TYPE_NAMES.get(code, 'unknown')
