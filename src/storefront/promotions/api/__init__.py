"""Promotions API package."""

from storefront.promotions.api.routes import promo_router

__all__ = ["promo_router"]
