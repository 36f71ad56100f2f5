"""Client-submitted cart and the pricing result built from it.

Nothing here is persisted as-is: the cart is untrusted input and
``PaymentDetails`` is recomputed from the catalogue on every checkout.
Both round-trip through plain dicts so they can be snapshotted on the
checkout record.
"""

from dataclasses import dataclass, field
from enum import Enum


class DeliveryType(Enum):
    POST = "post"
    COURIER = "courier"


@dataclass
class CartLine:
    variant_id: str
    product_ref_id: str
    sizes: dict[str, int]
    display: dict = field(default_factory=dict)


@dataclass
class Cart:
    lines: list[CartLine]
    delivery_type: str = DeliveryType.POST.value
    promo_code: str | None = None

    @property
    def variant_ids(self) -> list[str]:
        return [line.variant_id for line in self.lines]

    def to_dict(self, include_promo=True) -> dict:
        return {
            "products": {
                line.variant_id: {**line.display, "productRefId": line.product_ref_id, "sizes": dict(line.sizes)}
                for line in self.lines
            },
            "deliveryType": self.delivery_type,
            "promocode": {"code": self.promo_code} if self.promo_code and include_promo else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Cart":
        lines = []
        for variant_id, product in (data.get("products") or {}).items():
            display = {k: v for k, v in product.items() if k not in ("productRefId", "sizes")}
            sizes = {}
            for size, quantity in (product.get("sizes") or {}).items():
                # Older clients send {"quantity": n} per size
                if isinstance(quantity, dict):
                    quantity = quantity.get("quantity", 0)
                sizes[size] = int(quantity)
            lines.append(CartLine(variant_id, product.get("productRefId"), sizes, display))

        promocode = data.get("promocode") or {}
        return cls(
            lines=lines,
            delivery_type=data.get("deliveryType") or DeliveryType.POST.value,
            promo_code=promocode.get("code") or None,
        )


@dataclass(frozen=True)
class MismatchedVariant:
    variant_id: str
    size: str
    quantity: int

    def to_dict(self) -> dict:
        return {"variantId": self.variant_id, "size": self.size, "quantity": self.quantity}


@dataclass
class PaymentVariant:
    variant_id: str
    product_ref_id: str
    name: str
    sub_title: str | None
    color: str | None
    currency: str
    price: float
    old_price: float | None
    image: str | None
    sizes: dict[str, int]
    display: dict = field(default_factory=dict)

    @property
    def quantity(self) -> int:
        return sum(self.sizes.values())

    def to_dict(self) -> dict:
        return {
            **self.display,
            "productRefId": self.product_ref_id,
            "name": self.name,
            "subTitle": self.sub_title,
            "color": self.color,
            "currency": self.currency,
            "price": self.price,
            "oldPrice": self.old_price,
            "image": self.image,
            "sizes": dict(self.sizes),
        }

    @classmethod
    def from_dict(cls, variant_id: str, data: dict) -> "PaymentVariant":
        known = ("productRefId", "name", "subTitle", "color", "currency", "price", "oldPrice", "image", "sizes")
        return cls(
            variant_id=variant_id,
            product_ref_id=data["productRefId"],
            name=data["name"],
            sub_title=data.get("subTitle"),
            color=data.get("color"),
            currency=data["currency"],
            price=data["price"],
            old_price=data.get("oldPrice"),
            image=data.get("image"),
            sizes=dict(data["sizes"]),
            display={k: v for k, v in data.items() if k not in known},
        )


@dataclass
class PaymentDetails:
    total_count: int
    total_price: float
    currency: str
    payment_variants: list[PaymentVariant]
    mismatched_variants: list[MismatchedVariant]
    discount_percent: int = 0
    discount_amount: float = 0.0
    shipping_cost: float = 0.0

    @property
    def invalid(self) -> bool:
        return self.total_price == 0 or bool(self.mismatched_variants)

    def to_dict(self) -> dict:
        return {
            "invalid": self.invalid,
            "totalCount": self.total_count,
            "totalPrice": self.total_price,
            "currency": self.currency,
            "discountPercent": self.discount_percent,
            "discountAmount": self.discount_amount,
            "shippingCost": self.shipping_cost,
            "paymentVariants": {v.variant_id: v.to_dict() for v in self.payment_variants},
            "mismatchedVariants": [m.to_dict() for m in self.mismatched_variants],
        }

    def rejection(self) -> dict:
        return {
            "invalid": True,
            "totalPrice": self.total_price,
            "paymentVariants": {v.variant_id: v.to_dict() for v in self.payment_variants},
            "mismatchedVariants": [m.to_dict() for m in self.mismatched_variants],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PaymentDetails":
        return cls(
            total_count=data["totalCount"],
            total_price=data["totalPrice"],
            currency=data["currency"],
            payment_variants=[PaymentVariant.from_dict(k, v) for k, v in data["paymentVariants"].items()],
            mismatched_variants=[
                MismatchedVariant(m["variantId"], m["size"], m["quantity"]) for m in data["mismatchedVariants"]
            ],
            discount_percent=data.get("discountPercent", 0),
            discount_amount=data.get("discountAmount", 0.0),
            shipping_cost=data.get("shippingCost", 0.0),
        )
