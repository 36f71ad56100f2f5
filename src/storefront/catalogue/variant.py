"""ProductVariant aggregate: one purchasable colour of a product with stock per size."""

import json
from datetime import datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
)

from storefront.catalogue.events import StockDecremented, StockRestocked, VariantSoldOut
from storefront.domain import storefront

SOLD_OUT = "Sold out"


class Gender(Enum):
    MALE = "male"
    FEMALE = "female"


class InsufficientStock(ValidationError):
    """The requested quantity of a size is not on hand."""

    def __init__(self, variant_id, size, requested, available):
        super().__init__(
            {"sizes": [f"Only {available} of size {size} left for variant {variant_id}, {requested} requested"]}
        )
        self.variant_id = variant_id
        self.size = size
        self.requested = requested
        self.available = available


@storefront.entity(part_of="ProductVariant")
class SizeStock:
    """Units on hand for a single size label such as ``"M"`` or ``"42 (EU)"``."""

    size: String(required=True, max_length=30)
    count: Integer(default=0, min_value=0)


@storefront.aggregate
class ProductVariant:
    """A product in one colour, priced and stocked per size.

    ``images`` holds a JSON list of ``{"thumbnail", "original"}`` objects.
    ``gender`` is empty for unisex variants.
    """

    product_ref_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    sub_title: String(max_length=255)
    description: Text()
    price: Float(required=True, min_value=0.0)
    old_price: Float(min_value=0.0)
    currency: String(max_length=3, default="USD")
    color: String(max_length=50)
    gender: String(choices=Gender)
    sizes: HasMany(SizeStock)
    images: Text()
    available: Boolean(default=True)
    availability_details: String(max_length=255)
    clicks: Integer(default=0)
    created_at: DateTime(default=datetime.now)

    @classmethod
    def create(
        cls,
        product_ref_id,
        name,
        price,
        sizes=None,
        sub_title=None,
        description=None,
        old_price=None,
        currency="USD",
        color=None,
        gender=None,
        images=None,
    ):
        variant = cls(
            product_ref_id=product_ref_id,
            name=name,
            sub_title=sub_title,
            description=description,
            price=price,
            old_price=old_price,
            currency=currency,
            color=color,
            gender=gender,
            images=json.dumps(images or []),
        )
        for size, count in (sizes or {}).items():
            variant.add_sizes(SizeStock(size=size, count=count))
        return variant

    @property
    def image_list(self) -> list:
        return json.loads(self.images) if self.images else []

    @property
    def thumbnail(self) -> str | None:
        images = self.image_list
        return images[0].get("thumbnail") if images else None

    def size_stock(self, size):
        return next((s for s in self.sizes if s.size == size), None)

    def stock_for(self, size) -> int:
        stock = self.size_stock(size)
        return stock.count if stock else 0

    def in_stock_sizes(self) -> list[str]:
        return [s.size for s in self.sizes if s.count >= 1]

    def decrement_stock(self, size, quantity):
        """Take ``quantity`` units of ``size`` out of stock.

        Raises ``InsufficientStock`` and leaves the variant untouched when
        fewer units are on hand.
        """
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        stock = self.size_stock(size)
        available = stock.count if stock else 0
        if stock is None or available < quantity:
            raise InsufficientStock(str(self.id), size, quantity, available)

        stock.count = available - quantity
        self.raise_(
            StockDecremented(
                variant_id=str(self.id),
                size=size,
                quantity=quantity,
                remaining=stock.count,
                decremented_at=datetime.now(),
            )
        )
        self.mark_unavailable_if_exhausted()

    def restock(self, size, quantity):
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        stock = self.size_stock(size)
        if stock is None:
            stock = SizeStock(size=size, count=0)
            self.add_sizes(stock)
        stock.count = stock.count + quantity

        if not self.available and self.availability_details == SOLD_OUT:
            self.available = True
            self.availability_details = None

        self.raise_(
            StockRestocked(
                variant_id=str(self.id),
                size=size,
                quantity=quantity,
                new_count=stock.count,
                restocked_at=datetime.now(),
            )
        )

    def mark_unavailable_if_exhausted(self) -> bool:
        """Flag the variant sold out once every size is at zero."""
        if not self.available or any(s.count > 0 for s in self.sizes):
            return False

        self.available = False
        self.availability_details = SOLD_OUT
        self.raise_(VariantSoldOut(variant_id=str(self.id), sold_out_at=datetime.now()))
        return True

    def to_summary(self, image_limit=2) -> dict:
        return {
            "id": str(self.id),
            "productRefId": str(self.product_ref_id),
            "name": self.name,
            "subTitle": self.sub_title,
            "color": self.color,
            "gender": self.gender,
            "currency": self.currency,
            "price": self.price,
            "oldPrice": self.old_price,
            "sizes": [{"size": s.size, "count": s.count} for s in self.sizes],
            "images": self.image_list[:image_limit],
            "available": {"available": self.available, "details": self.availability_details},
        }

    def to_detail(self) -> dict:
        detail = self.to_summary(image_limit=None)
        detail["description"] = self.description
        return detail
