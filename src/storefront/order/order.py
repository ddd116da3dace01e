"""Order aggregate: an immutable snapshot of a cart taken at checkout."""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, List, String, ValueObject

from storefront.domain import storefront
from storefront.errors import InvalidInput


REQUIRED_ADDRESS_FIELDS = ("line1", "city", "state", "zip")


class OrderStatus(Enum):
    CREATED = "created"
    PAID = "paid"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class OrderItem:
    product_id: Identifier(required=True)
    variant_sku: String(max_length=64)
    title: String(required=True, max_length=255)
    price: Float(required=True, min_value=0.0)
    qty: Integer(required=True, min_value=1)
    thumb: String(max_length=1000)


@storefront.value_object(part_of="Order")
class Amounts:
    subtotal: Float(required=True, min_value=0.0)
    shipping: Float(default=0.0, min_value=0.0)
    total: Float(required=True, min_value=0.0)


@storefront.value_object(part_of="Order")
class ShippingAddress:
    label: String(max_length=50)
    line1: String(required=True, max_length=255)
    line2: String(max_length=255)
    city: String(required=True, max_length=100)
    state: String(required=True, max_length=100)
    zip: String(required=True, max_length=20)
    country: String(max_length=2, default="IN")
    phone: String(max_length=20)

    @classmethod
    def from_payload(cls, payload):
        """Build an address from request data, naming every missing required part."""
        payload = payload or {}
        missing = [name for name in REQUIRED_ADDRESS_FIELDS if not str(payload.get(name) or "").strip()]
        if missing:
            raise InvalidInput(
                "Shipping address must include line1, city, state and zip",
                {name: ["This field is required"] for name in missing},
            )

        return cls(
            label=payload.get("label"),
            line1=payload["line1"].strip(),
            line2=payload.get("line2"),
            city=payload["city"].strip(),
            state=payload["state"].strip(),
            zip=str(payload["zip"]).strip(),
            country=payload.get("country") or "IN",
            phone=payload.get("phone"),
        )


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------
@storefront.event(part_of="Order")
class OrderPlaced:
    """A cart was converted into an order and its stock reserved."""

    __version__ = 1

    order_id: Identifier(required=True)
    user_id: Identifier(required=True)
    item_count: Integer(required=True)
    total: Float(required=True)
    placed_at: DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    user_id: Identifier(required=True)
    items: List(content_type=ValueObject(OrderItem))
    amounts: ValueObject(Amounts)
    shipping_address: ValueObject(ShippingAddress)
    status: String(max_length=20, choices=OrderStatus, default=OrderStatus.CREATED.value)
    idempotency_key: String(max_length=100)
    placed_at: DateTime()

    @invariant.post
    def order_must_have_items(self):
        if not self.items:
            raise ValidationError({"items": ["An order must have at least one item"]})

    @invariant.post
    def amounts_must_match_items(self):
        if self.amounts is None:
            return

        subtotal = round(sum(item.price * item.qty for item in self.items), 2)
        if round(self.amounts.subtotal, 2) != subtotal:
            raise ValidationError({"amounts": ["Subtotal must equal the sum of item price times quantity"]})
        if round(self.amounts.total, 2) != round(self.amounts.subtotal + self.amounts.shipping, 2):
            raise ValidationError({"amounts": ["Total must equal subtotal plus shipping"]})

    @classmethod
    def create(cls, user_id, lines, shipping_address, shipping=0.0, idempotency_key=None):
        """Snapshot cart ``lines`` into a new order and compute its amounts."""
        items = [
            OrderItem(
                product_id=str(line.product_id),
                variant_sku=line.variant_sku or None,
                title=line.title,
                price=line.price,
                qty=line.qty,
                thumb=line.thumb,
            )
            for line in lines
        ]
        subtotal = round(sum(item.price * item.qty for item in items), 2)
        shipping = round(float(shipping or 0), 2)

        order = cls(
            user_id=user_id,
            items=items,
            amounts=Amounts(subtotal=subtotal, shipping=shipping, total=round(subtotal + shipping, 2)),
            shipping_address=shipping_address,
            status=OrderStatus.CREATED.value,
            idempotency_key=idempotency_key,
            placed_at=datetime.now(UTC),
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                item_count=sum(item.qty for item in items),
                total=order.amounts.total,
                placed_at=order.placed_at,
            )
        )
        return order
