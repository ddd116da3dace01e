"""Shopping cart aggregate: one per user, lines keyed by (product, variant).

Lines carry a snapshot of the product's title, thumbnail and unit price taken
when the line was first added. Adding the same (product, variant) again only
increases the quantity; the snapshot is left alone.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Dict, Float, HasMany, Identifier, Integer, String

from storefront.domain import storefront


def line_key(product_id, variant_sku=None):
    """Identity of a line within a cart. No sku and an empty sku are the same key."""
    return str(product_id), variant_sku or None


@storefront.entity(part_of="Cart")
class CartLine:
    product_id: Identifier(required=True)
    variant_sku: String(max_length=64)
    title: String(required=True, max_length=255)
    thumb: String(max_length=1000)
    price: Float(required=True, min_value=0.0)
    qty: Integer(required=True, min_value=1)
    meta: Dict()
    position: Integer(required=True, min_value=0)
    added_at: DateTime()

    @property
    def key(self):
        return line_key(self.product_id, self.variant_sku)

    @property
    def line_total(self):
        return round(self.price * self.qty, 2)


@storefront.aggregate
class Cart:
    user_id: Identifier(required=True, unique=True)
    items: HasMany(CartLine)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def line_keys_must_be_unique(self):
        keys = [line.key for line in self.items]
        if len(keys) != len(set(keys)):
            raise ValidationError({"items": ["A cart holds one line per product and variant"]})

    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(user_id=user_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    @property
    def lines(self):
        """Lines in the order they were first added."""
        return sorted(self.items, key=lambda line: line.position)

    def line_for(self, product_id, variant_sku=None):
        key = line_key(product_id, variant_sku)
        return next((line for line in self.items if line.key == key), None)

    def add_line(self, product, qty, variant_sku=None, meta=None):
        """Add ``qty`` of ``product`` (or one of its variants) to the cart.

        An existing line for the same key only has its quantity increased.
        """
        if qty < 1:
            raise ValidationError({"qty": ["Quantity must be a positive integer"]})

        now = datetime.now(UTC)
        existing = self.line_for(product.id, variant_sku)

        if existing is not None:
            existing.qty += qty
            line = existing
        else:
            line = CartLine(
                product_id=str(product.id),
                variant_sku=variant_sku or None,
                title=product.title,
                thumb=product.thumb,
                price=product.price,
                qty=qty,
                meta=dict(meta or {}),
                position=max((item.position for item in self.items), default=-1) + 1,
                added_at=now,
            )
            self.add_items(line)

        self.updated_at = now
        return line

    def remove_line(self, product_id, variant_sku=None):
        """Drop the line for the key. Returns False when there was nothing to drop."""
        line = self.line_for(product_id, variant_sku)
        if line is None:
            return False

        self.remove_items(line)
        self.updated_at = datetime.now(UTC)
        return True

    def clear(self):
        if self.items:
            self.remove_items(list(self.items))
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Totals
    # -------------------------------------------------------------------
    @property
    def is_empty(self):
        return not self.items

    @property
    def subtotal(self):
        return round(sum(line.price * line.qty for line in self.items), 2)

    @property
    def item_count(self):
        return sum(line.qty for line in self.items)
