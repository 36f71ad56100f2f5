"""Reconciler for checkouts that stopped between the charge and DONE.

Meant to be run periodically (``python -m storefront.manage reconcile``).
Every record still resting in CHARGING or a later non-terminal step after
``older_than`` is resumed from its last completed step.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

import structlog
from protean.utils.globals import current_domain

from storefront.errors import PricingRejected, StorefrontError
from storefront.ordering.checkout.record import CHARGED_STATES, Checkout, CheckoutStatus

logger = structlog.get_logger(__name__)

RESUMABLE_STATES = CHARGED_STATES | {CheckoutStatus.CHARGING.value}


@dataclass
class ReconcileSummary:
    completed: int = 0
    compensated: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.completed + self.compensated + self.failed


class CheckoutReconciler:
    def __init__(self, orchestrator):
        self.orchestrator = orchestrator

    def resume(self, checkout_id) -> dict:
        record = current_domain.repository_for(Checkout).get(checkout_id)
        return self.orchestrator.resume(record)

    def stalled(self, older_than: timedelta, now=None) -> list[Checkout]:
        cutoff = (now or datetime.now()) - older_than
        return current_domain.repository_for(Checkout).resting_since(RESUMABLE_STATES, cutoff)

    def reconcile_stalled(self, older_than=timedelta(minutes=15), now=None) -> ReconcileSummary:
        summary = ReconcileSummary()
        stalled = self.stalled(older_than, now)
        if not stalled:
            logger.info("No stalled checkouts found")
            return summary

        for record in stalled:
            checkout_id = str(record.id)
            try:
                self.orchestrator.resume(record)
                summary.completed += 1
                logger.info("Resumed stalled checkout", checkout_id=checkout_id, charge_id=record.charge_id)
            except PricingRejected:
                summary.compensated += 1
                logger.info("Stalled checkout compensated", checkout_id=checkout_id, charge_id=record.charge_id)
            except StorefrontError as exc:
                summary.failed += 1
                logger.error(
                    "Stalled checkout could not be resumed",
                    checkout_id=checkout_id,
                    charge_id=record.charge_id,
                    error=str(exc),
                )

        logger.info(
            "Checkout reconciliation complete",
            completed=summary.completed,
            compensated=summary.compensated,
            failed=summary.failed,
        )
        return summary
