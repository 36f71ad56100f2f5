"""Newsletter mails: the promo code itself and the invitation to subscribe."""


class PromoCodeTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        brand = context.get("brand", "Storefront")
        end_date = context.get("end_date")
        valid_until = end_date.strftime("%Y-%m-%d") if end_date else "soon"
        return {
            "subject": f"Your {context.get('percent_discount')}% {brand} promo code",
            "body": (
                "Thanks for subscribing to our newsletter!\n\n"
                f"Your code: {context.get('code')}\n"
                f"It takes {context.get('percent_discount')}% off items that are not already on sale "
                f"and is valid until {valid_until}."
            ),
        }


class PromoInviteTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        brand = context.get("brand", "Storefront")
        return {
            "subject": f"Get {context.get('percent_discount')}% off at {brand}",
            "body": (
                f"Subscribe to the {brand} newsletter and get a "
                f"{context.get('percent_discount')}% promo code for your next order:\n\n"
                f"{context.get('subscribe_link')}"
            ),
        }
