"""FastAPI application factory."""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.domain import Domain

from storefront.api.errors import register_exception_handlers
from storefront.api.routes import (
    auth_router,
    cart_router,
    category_router,
    order_router,
    product_router,
    search_router,
)
from storefront.utils.logging import add_context, clear_context, get_logger

logger = get_logger(__name__)


def create_app(domain: Domain) -> FastAPI:
    """Build the storefront app around an initialized ``domain``."""
    app = FastAPI(
        title="Storefront API",
        description="Catalogue, cart, checkout and customer accounts",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(domain.CORS_ORIGINS),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        """Push the domain context and tag log lines with the request."""
        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        clear_context()
        add_context(request_id=request_id, method=request.method, path=request.url.path)

        with domain.domain_context():
            response = await call_next(request)

        response.headers["X-Request-ID"] = request_id
        logger.debug("request_completed", status_code=response.status_code)
        return response

    register_exception_handlers(app)

    app.include_router(auth_router)
    app.include_router(product_router)
    app.include_router(category_router)
    app.include_router(search_router)
    app.include_router(cart_router)
    app.include_router(order_router)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "domain": domain.name})

    return app
