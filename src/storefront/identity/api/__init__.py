"""Identity API package."""

from storefront.identity.api.routes import user_router

__all__ = ["user_router"]
