"""HTTP wiring shared by every router."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from storefront.errors import StorefrontError


def register_error_handlers(app: FastAPI) -> None:
    """Map Protean exceptions and ``StorefrontError`` subclasses to JSON responses."""
    register_exception_handlers(app)

    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
