"""Pydantic request/response schemas for the storefront API.

These are the external contracts (anti-corruption layer). Keys are camelCase
on the wire; snake_case names are accepted on input too.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class SignupRequest(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "name": "Asha Rao",
                    "email": "asha@example.com",
                    "password": "Secret#1",
                    "phone": "9876543210",
                }
            ]
        },
    )

    name: str = ""
    email: str = ""
    password: str = ""
    phone: str = ""


class LoginRequest(CamelModel):
    email: str = ""
    password: str = ""


class AddressRequest(CamelModel):
    label: str | None = Field(None, max_length=50)
    line1: str | None = Field(None, max_length=255)
    line2: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    zip: str | None = Field(None, max_length=20)
    country: str | None = Field(None, max_length=2)
    phone: str | None = Field(None, max_length=20)


class AddToCartRequest(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={"examples": [{"productId": "3f2c...", "qty": 2, "variantSku": "red-M"}]},
    )

    product_id: str = Field(..., min_length=1, max_length=64)
    qty: int = 1
    variant_sku: str | None = Field(None, max_length=64)
    meta: dict[str, Any] | None = None


class RemoveFromCartRequest(CamelModel):
    product_id: str = Field(..., min_length=1, max_length=64)
    variant_sku: str | None = Field(None, max_length=64)


class PlaceOrderRequest(CamelModel):
    shipping_address: AddressRequest | None = None
    idempotency_key: str | None = Field(None, max_length=100)


# ---------------------------------------------------------------------------
# Catalogue responses
# ---------------------------------------------------------------------------
class ImageResponse(CamelModel):
    url: str
    alt: str | None = None


class VariantResponse(CamelModel):
    sku: str
    color: str | None = None
    size: str | None = None
    stock: int


class ProductSummary(CamelModel):
    id: str
    title: str
    brand: str | None = None
    price: float
    mrp: float | None = None
    discount_percent: int = 0
    thumb: str | None = None
    rating_avg: float = 0.0
    rating_count: int = 0
    in_stock: bool
    category_id: str | None = None
    subcategory_id: str | None = None
    tags: list[str] = []

    @classmethod
    def summary_fields(cls, product) -> dict[str, Any]:
        return {
            "id": str(product.id),
            "title": product.title,
            "brand": product.brand,
            "price": product.price,
            "mrp": product.mrp,
            "discount_percent": product.discount_percent,
            "thumb": product.thumb,
            "rating_avg": product.rating_avg,
            "rating_count": product.rating_count,
            "in_stock": product.in_stock,
            "category_id": str(product.category_id) if product.category_id else None,
            "subcategory_id": str(product.subcategory_id) if product.subcategory_id else None,
            "tags": list(product.tags or []),
        }

    @classmethod
    def from_product(cls, product) -> ProductSummary:
        return cls(**cls.summary_fields(product))


class ProductDetail(ProductSummary):
    description: str | None = None
    keywords: list[str] = []
    images: list[ImageResponse] = []
    variants: list[VariantResponse] = []
    stock: int = 0
    popularity: int = 0
    created_at: datetime | None = None

    @classmethod
    def from_product(cls, product) -> ProductDetail:
        return cls(
            **cls.summary_fields(product),
            description=product.description,
            keywords=list(product.keywords or []),
            images=[ImageResponse(url=i.url, alt=i.alt) for i in product.images or []],
            variants=[
                VariantResponse(sku=v.sku, color=v.color, size=v.size, stock=v.stock)
                for v in sorted(product.variants, key=lambda v: v.sku)
            ],
            stock=product.stock,
            popularity=product.popularity,
            created_at=product.created_at,
        )


class PageMeta(CamelModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def from_page(cls, page) -> PageMeta:
        return cls(page=page.page, limit=page.limit, total=page.total, pages=page.pages)


class ProductPage(CamelModel):
    data: list[ProductSummary]
    meta: PageMeta


class SubcategoryResponse(CamelModel):
    id: str
    name: str
    image_url: str | None = None


class CategoryResponse(CamelModel):
    id: str
    name: str
    description: str | None = None
    image_url: str | None = None
    subcategories: list[SubcategoryResponse] = []

    @classmethod
    def from_category(cls, category) -> CategoryResponse:
        return cls(
            id=str(category.id),
            name=category.name,
            description=category.description,
            image_url=category.image_url,
            subcategories=[
                SubcategoryResponse(id=str(s.id), name=s.name, image_url=s.image_url)
                for s in category.active_subcategories
            ],
        )


class HomeCategory(CamelModel):
    id: str
    name: str
    description: str | None = None
    products: list[ProductSummary]


class HomeResponse(CamelModel):
    categories: list[HomeCategory]


class Suggestion(CamelModel):
    id: str
    title: str
    brand: str | None = None
    url: str


class SuggestionsResponse(CamelModel):
    suggestions: list[Suggestion]


# ---------------------------------------------------------------------------
# Cart responses
# ---------------------------------------------------------------------------
class CartLineResponse(CamelModel):
    product_id: str
    variant_sku: str | None = None
    title: str
    thumb: str | None = None
    price: float
    qty: int
    meta: dict[str, Any] = {}
    line_total: float
    product: ProductDetail | None = None


class CartResponse(CamelModel):
    id: str | None = None
    items: list[CartLineResponse]
    subtotal: float
    item_count: int

    @classmethod
    def from_cart(cls, cart, expanded_lines, persisted=True) -> CartResponse:
        return cls(
            id=str(cart.id) if persisted else None,
            items=[
                CartLineResponse(
                    product_id=str(line.product_id),
                    variant_sku=line.variant_sku,
                    title=line.title,
                    thumb=line.thumb,
                    price=line.price,
                    qty=line.qty,
                    meta=dict(line.meta or {}),
                    line_total=line.line_total,
                    product=ProductDetail.from_product(product) if product is not None else None,
                )
                for line, product in expanded_lines
            ],
            subtotal=cart.subtotal,
            item_count=cart.item_count,
        )


# ---------------------------------------------------------------------------
# Order responses
# ---------------------------------------------------------------------------
class OrderItemResponse(CamelModel):
    product_id: str
    variant_sku: str | None = None
    title: str
    price: float
    qty: int
    thumb: str | None = None


class AmountsResponse(CamelModel):
    subtotal: float
    shipping: float
    total: float


class AddressResponse(CamelModel):
    label: str | None = None
    line1: str
    line2: str | None = None
    city: str
    state: str
    zip: str
    country: str | None = None
    phone: str | None = None

    @classmethod
    def from_address(cls, address, **extra) -> AddressResponse:
        return cls(
            **extra,
            label=address.label,
            line1=address.line1,
            line2=address.line2,
            city=address.city,
            state=address.state,
            zip=address.zip,
            country=address.country,
            phone=address.phone,
        )


class SavedAddressResponse(AddressResponse):
    """An address from the user's address book, addressable by id."""

    id: str

    @classmethod
    def from_saved(cls, address) -> SavedAddressResponse:
        return cls.from_address(address, id=str(address.id))


class OrderResponse(CamelModel):
    id: str
    items: list[OrderItemResponse]
    amounts: AmountsResponse
    shipping_address: AddressResponse
    status: str
    placed_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> OrderResponse:
        return cls(
            id=str(order.id),
            items=[
                OrderItemResponse(
                    product_id=str(i.product_id),
                    variant_sku=i.variant_sku,
                    title=i.title,
                    price=i.price,
                    qty=i.qty,
                    thumb=i.thumb,
                )
                for i in order.items
            ],
            amounts=AmountsResponse(
                subtotal=order.amounts.subtotal,
                shipping=order.amounts.shipping,
                total=order.amounts.total,
            ),
            shipping_address=AddressResponse.from_address(order.shipping_address),
            status=order.status,
            placed_at=order.placed_at,
        )


class OrderPage(CamelModel):
    data: list[OrderResponse]
    meta: PageMeta


# ---------------------------------------------------------------------------
# Account responses
# ---------------------------------------------------------------------------
class UserResponse(CamelModel):
    id: str
    name: str
    email: str
    phone: str
    role: str
    addresses: list[SavedAddressResponse] = []
    created_at: datetime | None = None

    @classmethod
    def from_user(cls, user) -> UserResponse:
        return cls(
            id=str(user.id),
            name=user.name,
            email=user.email,
            phone=user.phone,
            role=user.role,
            addresses=[SavedAddressResponse.from_saved(a) for a in user.address_book],
            created_at=user.created_at,
        )


class AuthResponse(CamelModel):
    user: UserResponse
    token: str


class MessageResponse(CamelModel):
    message: str
