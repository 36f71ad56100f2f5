"""Runtime settings read from the environment.

Every value has a default so the application and the test suite start
without any environment configured.  ``settings`` is built once at import
time; tests that need different values construct their own ``Settings``.
"""

import os
from dataclasses import dataclass, field


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, default))


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, default))


@dataclass(frozen=True)
class Settings:
    shipping_courier: float = 10.0
    shipping_post: float = 5.0
    free_shipping_threshold: float = 100.0
    subscription_percent_discount: int = 10
    promo_validity_days: int = 7
    promo_retention_days: int = 150
    promo_usage_limit: int = 1
    max_search_results: int = 20
    payment_gateway: str = "fake"
    stripe_secret: str = ""
    client_url: str = "http://localhost:3000"
    brand: str = "Storefront"
    shop_email: str = "orders@storefront.local"
    search_colors: tuple = field(
        default=(
            "black",
            "white",
            "grey",
            "red",
            "blue",
            "green",
            "yellow",
            "orange",
            "pink",
            "purple",
            "brown",
            "beige",
            "navy",
        )
    )

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            shipping_courier=_env_float("SHIPPING_COURIER_USD", 10.0),
            shipping_post=_env_float("SHIPPING_POST_USD", 5.0),
            free_shipping_threshold=_env_float("FREE_SHIPPING_THRESHOLD_USD", 100.0),
            subscription_percent_discount=_env_int("SUBSCRIPTION_PERCENT_DISCOUNT", 10),
            promo_validity_days=_env_int("PROMO_VALIDITY_DAYS", 7),
            promo_retention_days=_env_int("PROMO_RETENTION_DAYS", 150),
            promo_usage_limit=_env_int("PROMO_USAGE_LIMIT", 1),
            max_search_results=_env_int("MAX_SEARCH_RESULTS", 20),
            payment_gateway=os.getenv("PAYMENT_GATEWAY", "fake"),
            stripe_secret=os.getenv("STRIPE_SECRET", ""),
            client_url=os.getenv("CLIENT_URL", "http://localhost:3000"),
            brand=os.getenv("BRAND", "Storefront"),
            shop_email=os.getenv("SHOP_EMAIL", "orders@storefront.local"),
        )


settings = Settings.from_env()
