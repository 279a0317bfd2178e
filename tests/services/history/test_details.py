"""Tests for effect details decoding and legacy backfill."""

import json

import pytest

from effectlog.lib.enums import EffectType
from effectlog.services.history.details import (
    DecodedDetails,
    PayloadVersion,
    asset_type_for_canonical_asset,
    backfill,
    classify,
    decode_details,
)
from effectlog.services.history.errors import DetailsDecodeError
from effectlog.services.history.models import Effect

ISSUER = "G" + "A" * 55
USD = f"USD:{ISSUER}"
LONG_CODE = f"LONGCODE1234:{ISSUER}"


def make_effect(effect_type, details) -> Effect:
    return Effect(
        history_account_id=1,
        history_operation_id=4294971393,
        order=1,
        type=int(effect_type),
        details=None if details is None else json.dumps(details),
    )


class TestAssetTypeInference:

    def test_short_code_is_alphanum4(self):
        assert asset_type_for_canonical_asset(USD) == "credit_alphanum4"

    def test_four_char_code_boundary(self):
        assert len(f"ABCD:{ISSUER}") == 61
        assert asset_type_for_canonical_asset(f"ABCD:{ISSUER}") == "credit_alphanum4"
        assert asset_type_for_canonical_asset(f"ABCDE:{ISSUER}") == "credit_alphanum12"

    def test_long_code_is_alphanum12(self):
        assert asset_type_for_canonical_asset(LONG_CODE) == "credit_alphanum12"


class TestBackfill:

    @pytest.mark.parametrize("effect_type", [
        EffectType.TRUSTLINE_SPONSORSHIP_CREATED,
        EffectType.TRUSTLINE_SPONSORSHIP_UPDATED,
        EffectType.TRUSTLINE_SPONSORSHIP_REMOVED,
    ])
    def test_legacy_trustline_sponsorship_gets_asset_type(self, effect_type):
        details = decode_details(make_effect(effect_type, {"asset": LONG_CODE, "sponsor": ISSUER}))
        assert details == {"asset": LONG_CODE, "sponsor": ISSUER, "asset_type": "credit_alphanum12"}

    def test_existing_asset_type_is_kept(self):
        payload = {"asset": USD, "asset_type": "liquidity_pool_shares"}
        details = decode_details(make_effect(EffectType.TRUSTLINE_SPONSORSHIP_CREATED, payload))
        assert details == payload

    def test_other_kinds_pass_through(self):
        payload = {"asset": USD}
        assert decode_details(make_effect(EffectType.TRUSTLINE_CREATED, payload)) == payload

    def test_classify(self):
        assert classify(EffectType.TRUSTLINE_SPONSORSHIP_UPDATED, {"asset": USD}) is PayloadVersion.LEGACY
        assert classify(EffectType.TRADE, {}) is PayloadVersion.CURRENT

    def test_backfill_is_pure(self):
        payload = {"asset": USD}
        decoded = DecodedDetails(int(EffectType.TRUSTLINE_SPONSORSHIP_REMOVED), PayloadVersion.LEGACY, payload)

        upgraded = backfill(decoded)

        assert upgraded.version is PayloadVersion.CURRENT
        assert upgraded.payload["asset_type"] == "credit_alphanum4"
        assert payload == {"asset": USD}
        assert backfill(upgraded) is upgraded


class TestDecodeDetails:

    def test_missing_details(self):
        assert decode_details(make_effect(EffectType.ACCOUNT_REMOVED, None)) is None

    def test_invalid_json(self):
        effect = make_effect(EffectType.TRADE, None).model_copy(update={"details": "{not json"})
        with pytest.raises(DetailsDecodeError, match="unmarshal"):
            decode_details(effect)

    def test_non_object_json(self):
        with pytest.raises(DetailsDecodeError, match="not a JSON object"):
            decode_details(make_effect(EffectType.TRADE, [1, 2]))
