"""Inventory repository: the only writer of variant stock levels."""

from protean.exceptions import ObjectNotFoundError

from storefront.catalogue.variant import ProductVariant
from storefront.domain import logger, storefront


@storefront.repository(part_of=ProductVariant)
class ProductVariantRepository:
    def find_variants_by_ids(self, ids) -> dict:
        """Return ``{id: variant}`` for the ids that exist; unknown ids are left out."""
        variants = {}
        for variant_id in dict.fromkeys(ids):
            try:
                variants[variant_id] = self.get(variant_id)
            except ObjectNotFoundError:
                continue
        return variants

    def find_all(self, limit=1000) -> list[ProductVariant]:
        return self._dao.query.limit(limit).all().items

    def decrement(self, variant_id, size, quantity) -> ProductVariant:
        """Conditionally decrement one size of a freshly read variant.

        Raises ``InsufficientStock`` when the stock on hand dropped below
        ``quantity`` since the cart was priced; nothing is written then.
        """
        variant = self.get(variant_id)
        variant.decrement_stock(size, quantity)
        self.add(variant)

        logger.info(
            "Stock decremented",
            variant_id=variant_id,
            size=size,
            quantity=quantity,
            available=variant.available,
        )
        return variant

    def restock(self, variant_id, size, quantity) -> ProductVariant:
        variant = self.get(variant_id)
        variant.restock(size, quantity)
        self.add(variant)

        logger.info("Stock restocked", variant_id=variant_id, size=size, quantity=quantity)
        return variant

    def mark_unavailable_if_exhausted(self, variant_id) -> bool:
        variant = self.get(variant_id)
        if variant.mark_unavailable_if_exhausted():
            self.add(variant)
            logger.info("Variant sold out", variant_id=variant_id)
            return True
        return False
