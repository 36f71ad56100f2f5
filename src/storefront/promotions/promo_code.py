"""PromoCode aggregate. Only the SHA-256 hash of a code is ever stored."""

import hashlib
from datetime import datetime, timedelta

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Integer, String

from storefront.domain import storefront
from storefront.errors import PromoCodeInvalid
from storefront.promotions.events import PromoCodeIssued, PromoCodeReleased, PromoCodeUsed


def hash_code(code: str) -> str:
    return hashlib.sha256(code.strip().encode("utf-8")).hexdigest()


@storefront.aggregate
class PromoCode:
    code_hash: String(required=True, max_length=64)
    email: String(required=True, max_length=254)
    percent_discount: Integer(required=True, min_value=1, max_value=100)
    usage_limit: Integer(default=1, min_value=1)
    usage_count: Integer(default=0, min_value=0)
    start_date: DateTime(required=True)
    end_date: DateTime(required=True)
    expiry_at: DateTime(required=True)

    @invariant.post
    def usage_count_cannot_exceed_limit(self):
        if self.usage_count > self.usage_limit:
            raise ValidationError({"usage_count": ["Usage count cannot exceed the usage limit"]})

    @classmethod
    def issue(cls, code, email, percent_discount, usage_limit=1, validity_days=7, retention_days=150, now=None):
        now = now or datetime.now()
        promo = cls(
            code_hash=hash_code(code),
            email=email,
            percent_discount=percent_discount,
            usage_limit=usage_limit,
            start_date=now,
            end_date=now + timedelta(days=validity_days),
            expiry_at=now + timedelta(days=retention_days),
        )
        promo.raise_(
            PromoCodeIssued(
                promo_code_id=str(promo.id),
                email=email,
                percent_discount=percent_discount,
                end_date=promo.end_date,
            )
        )
        return promo

    def is_expired(self, now=None) -> bool:
        return (now or datetime.now()) > self.end_date

    def is_exhausted(self) -> bool:
        return self.usage_count >= self.usage_limit

    def check_redeemable(self, now=None):
        if self.is_expired(now):
            raise PromoCodeInvalid("Promo code has expired")
        if self.is_exhausted():
            raise PromoCodeInvalid("Promo code has already been used")

    def record_use(self) -> bool:
        """Count one redemption. Returns False without changes once the limit is reached."""
        if self.is_exhausted():
            return False

        self.usage_count += 1
        self.raise_(
            PromoCodeUsed(
                promo_code_id=str(self.id),
                usage_count=self.usage_count,
                usage_limit=self.usage_limit,
            )
        )
        return True

    def release_use(self) -> bool:
        if self.usage_count == 0:
            return False

        self.usage_count -= 1
        self.raise_(PromoCodeReleased(promo_code_id=str(self.id), usage_count=self.usage_count))
        return True
