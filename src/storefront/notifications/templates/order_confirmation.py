"""Order confirmation mails: the customer's receipt and the shop's internal copy."""


def _product_lines(products: list[dict]) -> str:
    lines = []
    for product in products:
        sizes = ", ".join(f"{s['size']} x{s['quantity']}" for s in product.get("sizes", []))
        lines.append(f"- {product.get('name')} ({product.get('color') or 'n/a'}) {sizes}: {product.get('price')}")
    return "\n".join(lines)


class OrderConfirmationTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        first_name = context.get("first_name") or "there"
        currency = (context.get("currency") or "usd").upper()
        total = context.get("total_price", 0)
        brand = context.get("brand", "Storefront")
        return {
            "subject": f"{brand}: order #{order_id} confirmed",
            "body": (
                f"Hi {first_name},\n\n"
                f"Thank you for your order #{order_id}.\n\n"
                f"{_product_lines(context.get('products', []))}\n\n"
                f"Items: {context.get('total_count', 0)}\n"
                f"Shipping: {context.get('shipping_cost', 0)}\n"
                f"Total paid: {currency} {total:.2f}\n\n"
                f"Delivery ({context.get('delivery_type', 'post')}) to:\n{context.get('delivery_address', '')}\n\n"
                f"Thank you for shopping with {brand}!"
            ),
        }


class InternalOrderCopyTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        currency = (context.get("currency") or "usd").upper()
        return {
            "subject": f"New order #{order_id}",
            "body": (
                f"Order #{order_id} from {context.get('customer_email')}\n"
                f"Charge: {context.get('charge_id')}\n"
                f"Total: {currency} {context.get('total_price', 0):.2f}\n\n"
                f"{_product_lines(context.get('products', []))}\n\n"
                f"Deliver ({context.get('delivery_type', 'post')}) to:\n{context.get('delivery_address', '')}"
            ),
        }
