"""Tests for the PromoCode aggregate."""

from datetime import datetime, timedelta

import pytest
from protean.exceptions import ValidationError
from storefront.errors import PromoCodeInvalid
from storefront.promotions.events import PromoCodeIssued, PromoCodeReleased, PromoCodeUsed
from storefront.promotions.promo_code import PromoCode, hash_code

NOW = datetime(2026, 3, 1, 12, 0)


def _promo(**overrides):
    values = {"code": "SAVE10", "email": "jane@example.com", "percent_discount": 10, "now": NOW}
    values.update(overrides)
    return PromoCode.issue(**values)


class TestHashCode:
    def test_is_sha256_hex(self):
        digest = hash_code("SAVE10")
        assert len(digest) == 64
        assert digest != "SAVE10"

    def test_surrounding_whitespace_is_ignored(self):
        assert hash_code(" SAVE10 ") == hash_code("SAVE10")


class TestIssue:
    def test_only_the_hash_is_stored(self):
        promo = _promo()
        assert promo.code_hash == hash_code("SAVE10")
        assert "SAVE10" not in promo.to_dict().values()

    def test_dates(self):
        promo = _promo(validity_days=7, retention_days=150)
        assert promo.start_date == NOW
        assert promo.end_date == NOW + timedelta(days=7)
        assert promo.expiry_at == NOW + timedelta(days=150)

    def test_raises_issued_event(self):
        promo = _promo()
        events = [e for e in promo._events if isinstance(e, PromoCodeIssued)]
        assert len(events) == 1
        assert events[0].percent_discount == 10

    def test_discount_bounds(self):
        with pytest.raises(ValidationError):
            _promo(percent_discount=0)
        with pytest.raises(ValidationError):
            _promo(percent_discount=101)


class TestRedeemable:
    def test_valid_code(self):
        _promo().check_redeemable(NOW + timedelta(days=1))

    def test_expired(self):
        promo = _promo()
        assert promo.is_expired(NOW + timedelta(days=8)) is True
        with pytest.raises(PromoCodeInvalid):
            promo.check_redeemable(NOW + timedelta(days=8))

    def test_exhausted(self):
        promo = _promo()
        promo.record_use()
        assert promo.is_exhausted() is True
        with pytest.raises(PromoCodeInvalid):
            promo.check_redeemable(NOW)


class TestUsage:
    def test_record_use(self):
        promo = _promo(usage_limit=2)
        assert promo.record_use() is True
        assert promo.usage_count == 1
        assert any(isinstance(e, PromoCodeUsed) for e in promo._events)

    def test_record_use_stops_at_limit(self):
        promo = _promo()
        promo.record_use()
        assert promo.record_use() is False
        assert promo.usage_count == 1

    def test_release_use(self):
        promo = _promo()
        promo.record_use()
        assert promo.release_use() is True
        assert promo.usage_count == 0
        assert any(isinstance(e, PromoCodeReleased) for e in promo._events)

    def test_release_without_use(self):
        assert _promo().release_use() is False
