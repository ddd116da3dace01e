"""Storefront error taxonomy.

Every error a request can end in is one of these kinds. They extend protean's
exceptions so that code using the framework's own vocabulary (a repository
``ObjectNotFoundError``, an aggregate ``ValidationError``) and code raising the
storefront kinds are handled by the same HTTP mapping in ``api.errors``.
"""

from typing import Any

from protean.exceptions import (
    InvalidStateError,
    ObjectNotFoundError,
    ProteanException,
    ValidationError,
)


class InvalidInput(ValidationError):
    """Missing or malformed request data. Surfaces as 400."""

    def __init__(self, message: str, errors: dict[str, list[str]] | None = None) -> None:
        super().__init__(errors or {"_request": [message]})
        self.message = message


class Unauthorized(ProteanException):
    """No identity, or an invalid one, on a protected operation. Surfaces as 401."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)
        self.message = message


class NotFound(ObjectNotFoundError):
    """A referenced product, cart, category or order does not exist. Surfaces as 404."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Conflict(InvalidStateError):
    """A business rule rejected the operation. Surfaces as 409.

    ``data`` carries the structured detail a client needs to act on the
    failure, e.g. which product and variant ran short and how much is left.
    """

    code = "conflict"

    def __init__(self, message: str, data: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.data = data


# ---------------------------------------------------------------------------
# Order placement rejections
# ---------------------------------------------------------------------------
class EmptyCart(Conflict):
    code = "empty_cart"

    def __init__(self) -> None:
        super().__init__("Cart is empty")


class ProductUnavailable(Conflict):
    code = "product_unavailable"

    def __init__(self, product_id: str) -> None:
        super().__init__(
            "Product is no longer available",
            data={"product": product_id, "variantSku": None, "available": 0},
        )
        self.product_id = product_id


class VariantNotFound(Conflict):
    code = "variant_not_found"

    def __init__(self, product_id: str, variant_sku: str) -> None:
        super().__init__(
            "Variant not found",
            data={"product": product_id, "variantSku": variant_sku, "available": 0},
        )
        self.product_id = product_id
        self.variant_sku = variant_sku


class InsufficientStock(Conflict):
    code = "insufficient_stock"

    def __init__(self, product_id: str, variant_sku: str | None, available: int) -> None:
        message = "Insufficient stock for variant" if variant_sku else "Insufficient stock"
        super().__init__(
            message,
            data={"product": product_id, "variantSku": variant_sku, "available": available},
        )
        self.product_id = product_id
        self.variant_sku = variant_sku
        self.available = available
