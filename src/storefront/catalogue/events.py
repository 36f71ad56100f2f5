"""Domain events for the ProductVariant aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="ProductVariant")
class StockDecremented:
    """Units of one size were taken out of stock by a paid order."""

    __version__ = 1

    variant_id: Identifier(required=True)
    size: String(required=True)
    quantity: Integer(required=True)
    remaining: Integer(required=True)
    decremented_at: DateTime(required=True)


@storefront.event(part_of="ProductVariant")
class StockRestocked:
    """Units of one size were put back, usually by a compensated checkout."""

    __version__ = 1

    variant_id: Identifier(required=True)
    size: String(required=True)
    quantity: Integer(required=True)
    new_count: Integer(required=True)
    restocked_at: DateTime(required=True)


@storefront.event(part_of="ProductVariant")
class VariantSoldOut:
    __version__ = 1

    variant_id: Identifier(required=True)
    sold_out_at: DateTime(required=True)
