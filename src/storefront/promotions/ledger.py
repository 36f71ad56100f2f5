"""Promo ledger: issues, validates and counts redemptions of promo codes.

Codes are looked up by their SHA-256 hash.  The ledger is the only place
where ``usage_count`` changes.
"""

import secrets
from dataclasses import dataclass
from datetime import datetime

from protean.utils.globals import current_domain

from storefront.config import settings as default_settings
from storefront.domain import logger
from storefront.errors import PromoCodeConflict, PromoCodeNotFound
from storefront.promotions.promo_code import PromoCode, hash_code
from storefront.promotions.subscriber import NewsSubscriber

PURGE_BATCH_SIZE = 100


@dataclass(frozen=True)
class IssuedCode:
    code: str
    end_date: datetime
    percent_discount: int


def generate_code() -> str:
    """10 upper-case hex characters."""
    return secrets.token_hex(5).upper()


class PromoLedger:
    def __init__(self, settings=None):
        self.settings = settings or default_settings

    def _find_by_hash(self, code_hash) -> PromoCode | None:
        repo = current_domain.repository_for(PromoCode)
        return repo._dao.query.filter(code_hash=code_hash).all().first

    def _find_by_email(self, email) -> PromoCode | None:
        repo = current_domain.repository_for(PromoCode)
        return repo._dao.query.filter(email=email).all().first

    def _is_subscribed(self, email) -> bool:
        repo = current_domain.repository_for(NewsSubscriber)
        return repo._dao.query.filter(email=email).all().first is not None

    def issue(self, email, code=None, discount=None) -> IssuedCode:
        if self._find_by_email(email) is not None:
            raise PromoCodeConflict(f"{email} is already subscribed")

        plaintext = code or generate_code()
        promo = PromoCode.issue(
            code=plaintext,
            email=email,
            percent_discount=discount or self.settings.subscription_percent_discount,
            usage_limit=self.settings.promo_usage_limit,
            validity_days=self.settings.promo_validity_days,
            retention_days=self.settings.promo_retention_days,
        )
        current_domain.repository_for(PromoCode).add(promo)

        if self._is_subscribed(email):
            logger.info("Newsletter subscriber already exists", email=email)
        else:
            current_domain.repository_for(NewsSubscriber).add(NewsSubscriber.subscribe(email))

        logger.info("Promo code issued", email=email, promo_code_id=str(promo.id))
        return IssuedCode(code=plaintext, end_date=promo.end_date, percent_discount=promo.percent_discount)

    def subscribe(self, email) -> IssuedCode | None:
        """Subscribe ``email`` and issue its code; ``None`` when it already holds one."""
        if self._find_by_email(email) is None:
            return self.issue(email)

        if not self._is_subscribed(email):
            current_domain.repository_for(NewsSubscriber).add(NewsSubscriber.subscribe(email))
        logger.info("Subscriber already holds a promo code", email=email)
        return None

    def validate(self, code, now=None) -> dict:
        """Return ``{"percentDiscount": n}`` for a redeemable code.

        Raises ``PromoCodeNotFound`` for an unknown code and ``PromoCodeInvalid``
        for an expired or used-up one, checked in that order.
        """
        promo = self._find_by_hash(hash_code(code))
        if promo is None:
            raise PromoCodeNotFound("Promo code not found")

        promo.check_redeemable(now)
        return {"percentDiscount": promo.percent_discount}

    def mark_used(self, code) -> bool:
        return self.mark_used_by_hash(hash_code(code))

    def mark_used_by_hash(self, code_hash) -> bool:
        """Count one redemption. A purged code is skipped with a log line."""
        promo = self._find_by_hash(code_hash)
        if promo is None:
            logger.warning("Promo code not found when marking use", code_hash=code_hash[:12])
            return False

        if not promo.record_use():
            logger.warning("Promo code usage limit already reached", promo_code_id=str(promo.id))
            return False

        current_domain.repository_for(PromoCode).add(promo)
        logger.info("Promo code use recorded", promo_code_id=str(promo.id), usage_count=promo.usage_count)
        return True

    def release_by_hash(self, code_hash) -> bool:
        promo = self._find_by_hash(code_hash)
        if promo is None or not promo.release_use():
            return False

        current_domain.repository_for(PromoCode).add(promo)
        logger.info("Promo code use released", promo_code_id=str(promo.id), usage_count=promo.usage_count)
        return True

    def invite(self, email) -> int:
        """Check an invitation may be sent and return the discount it offers."""
        if self._is_subscribed(email) and self._find_by_email(email) is not None:
            raise PromoCodeConflict(f"{email} is already subscribed to the newsletter")
        return self.settings.subscription_percent_discount

    def purge_expired(self, now=None) -> int:
        """Delete codes whose retention period is over."""
        now = now or datetime.now()
        repo = current_domain.repository_for(PromoCode)
        expired = repo._dao.query.filter(expiry_at__lt=now)

        purged = 0
        while True:
            batch = expired.limit(PURGE_BATCH_SIZE).all().items
            if not batch:
                break
            for promo in batch:
                repo._dao.delete(promo)
            purged += len(batch)

        logger.info("Expired promo codes purged", purged=purged)
        return purged
