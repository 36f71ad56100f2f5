"""Checkout records, one per attempt of an idempotency key."""

from storefront.domain import storefront
from storefront.ordering.checkout.record import Checkout

PAGE_SIZE = 100


@storefront.repository(part_of=Checkout)
class CheckoutRepository:
    def _all(self, query) -> list[Checkout]:
        """Read every page of ``query``."""
        records = []
        offset = 0
        while True:
            page = query.offset(offset).limit(PAGE_SIZE).all()
            records.extend(page.items)
            if not page.has_next:
                return records
            offset += PAGE_SIZE

    def attempts_for(self, idempotency_key) -> list[Checkout]:
        query = self._dao.query.filter(idempotency_key=idempotency_key).order_by("attempt")
        return self._all(query)

    def latest_for(self, idempotency_key) -> Checkout | None:
        attempts = self.attempts_for(idempotency_key)
        return attempts[-1] if attempts else None

    def resting_since(self, statuses, cutoff) -> list[Checkout]:
        """Records in one of ``statuses`` not touched after ``cutoff``, oldest first."""
        query = self._dao.query.filter(status__in=list(statuses), updated_at__lte=cutoff).order_by("updated_at")
        return self._all(query)
