"""Product aggregate: the purchasable catalogue item and its variants.

A product draws stock from exactly one kind of pool. Without variants, the
product's own ``stock`` is what customers buy from. With variants, every
purchase names a variant sku and draws from that variant's ``stock``; the
product-level count is then held at zero so that no code path can sell from
it by accident.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    List,
    String,
    Text,
    ValueObject,
)

from storefront.domain import storefront
from storefront.errors import InsufficientStock, VariantNotFound


@storefront.value_object(part_of="Product")
class ProductImage:
    url: String(required=True, max_length=1000)
    alt: String(max_length=255)


@storefront.entity(part_of="Product")
class Variant:
    """A purchasable color/size configuration with its own stock count."""

    sku: String(required=True, max_length=64)
    color: String(max_length=50)
    size: String(max_length=20)
    stock: Integer(default=0, min_value=0)


@storefront.event(part_of="Product")
class StockReserved:
    """Stock was taken out of a product (or variant) pool by an order."""

    __version__ = 1

    product_id: Identifier(required=True)
    variant_sku: String(max_length=64)
    quantity: Integer(required=True)
    remaining: Integer(required=True)


@storefront.aggregate
class Product:
    title: String(required=True, max_length=255)
    brand: String(max_length=100)
    category_id: Identifier()
    subcategory_id: Identifier()
    description: Text()
    keywords: List(String(max_length=100))
    tags: List(String(max_length=100))
    # Lowercased title, brand, keywords and tags, one per line, so that a
    # substring search never matches across two fields.
    search_terms: Text(sanitize=False)
    price: Float(required=True, min_value=0.0)
    mrp: Float(min_value=0.0)
    stock: Integer(default=0, min_value=0)
    variants: HasMany(Variant)
    images: List(content_type=ValueObject(ProductImage))
    thumb: String(max_length=1000)
    rating_avg: Float(default=0.0, min_value=0.0, max_value=5.0)
    rating_count: Integer(default=0, min_value=0)
    popularity: Integer(default=0, min_value=0)
    is_active: Boolean(default=True)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def variant_skus_must_be_unique(self):
        skus = [v.sku for v in self.variants]
        if len(skus) != len(set(skus)):
            raise ValidationError({"variants": ["Variant skus must be unique within a product"]})

    @invariant.post
    def variant_products_hold_no_base_stock(self):
        if self.variants and self.stock:
            raise ValidationError({"stock": ["Products with variants keep their stock on the variants"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        title,
        price,
        brand=None,
        category_id=None,
        subcategory_id=None,
        description=None,
        keywords=None,
        tags=None,
        mrp=None,
        stock=0,
        images=None,
        thumb=None,
        popularity=0,
        rating_avg=0.0,
        rating_count=0,
        is_active=True,
        created_at=None,
    ):
        now = created_at or datetime.now(UTC)
        images = [ProductImage(url=img["url"], alt=img.get("alt")) for img in images or []]

        product = cls(
            title=title.strip(),
            brand=brand,
            category_id=category_id,
            subcategory_id=subcategory_id,
            description=description,
            keywords=list(keywords or []),
            tags=list(tags or []),
            price=price,
            mrp=mrp,
            stock=stock,
            images=images,
            thumb=thumb or (images[0].url if images else None),
            popularity=popularity,
            rating_avg=rating_avg,
            rating_count=rating_count,
            is_active=is_active,
            search_terms=cls._search_terms(title, brand, keywords, tags),
            created_at=now,
            updated_at=now,
        )
        return product

    @staticmethod
    def _search_terms(title, brand, keywords, tags):
        values = [title, brand, *(keywords or []), *(tags or [])]
        return "\n".join(v.strip().lower() for v in values if v and v.strip())

    # -------------------------------------------------------------------
    # Catalogue management
    # -------------------------------------------------------------------
    def add_variant(self, sku, stock=0, color=None, size=None):
        if self.variant(sku) is not None:
            raise ValidationError({"sku": [f"Variant {sku} already exists"]})

        variant = Variant(sku=sku, stock=stock, color=color, size=size)
        self.add_variants(variant)
        self.updated_at = datetime.now(UTC)
        return variant

    def restock(self, quantity, variant_sku=None):
        if quantity <= 0:
            raise ValidationError({"quantity": ["Restock quantity must be positive"]})

        if variant_sku is not None:
            variant = self.variant(variant_sku)
            if variant is None:
                raise VariantNotFound(str(self.id), variant_sku)
            variant.stock += quantity
        else:
            if self.variants:
                raise ValidationError({"variant_sku": ["A variant sku is required for products with variants"]})
            self.stock += quantity

        self.updated_at = datetime.now(UTC)

    def change_price(self, price, mrp=None):
        self.price = price
        if mrp is not None:
            self.mrp = mrp
        self.updated_at = datetime.now(UTC)

    def tag(self, keywords=None, tags=None):
        if keywords is not None:
            self.keywords = list(keywords)
        if tags is not None:
            self.tags = list(tags)
        self.search_terms = self._search_terms(self.title, self.brand, self.keywords, self.tags)
        self.updated_at = datetime.now(UTC)

    def deactivate(self):
        self.is_active = False
        self.updated_at = datetime.now(UTC)

    def activate(self):
        self.is_active = True
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Stock pools
    # -------------------------------------------------------------------
    def variant(self, sku):
        return next((v for v in self.variants if v.sku == sku), None)

    def available(self, variant_sku=None):
        """Units purchasable from the pool a cart line with ``variant_sku`` draws on.

        Raises ``VariantNotFound`` when the sku is not one of this product's
        variants. A product with variants has nothing to sell without a sku.
        """
        if variant_sku:
            variant = self.variant(variant_sku)
            if variant is None:
                raise VariantNotFound(str(self.id), variant_sku)
            return variant.stock

        return 0 if self.variants else self.stock

    def reserve(self, quantity, variant_sku=None):
        """Take ``quantity`` units out of a stock pool.

        Refuses rather than going negative; callers are expected to have
        checked availability already.
        """
        available = self.available(variant_sku)
        if quantity > available:
            raise InsufficientStock(str(self.id), variant_sku or None, available)

        if variant_sku:
            variant = self.variant(variant_sku)
            variant.stock -= quantity
        else:
            self.stock -= quantity

        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockReserved(
                product_id=str(self.id),
                variant_sku=variant_sku or None,
                quantity=quantity,
                remaining=available - quantity,
            )
        )

    # -------------------------------------------------------------------
    # Display values
    # -------------------------------------------------------------------
    @property
    def discount_percent(self):
        if self.mrp and self.mrp > self.price:
            return round((self.mrp - self.price) / self.mrp * 100)
        return 0

    @property
    def in_stock(self):
        if self.variants:
            return any(v.stock > 0 for v in self.variants)
        return self.stock > 0
