"""Storefront HTTP API package."""

from storefront.api.application import create_app
from storefront.api.routes import (
    auth_router,
    cart_router,
    category_router,
    order_router,
    product_router,
    search_router,
)

__all__ = [
    "create_app",
    "auth_router",
    "product_router",
    "category_router",
    "search_router",
    "cart_router",
    "order_router",
]
