"""Order placement: turn a user's cart into an order while reserving stock.

The handler runs in a single unit of work:

1. Replay: an order already placed under the same idempotency key is returned
   as is.
2. Validation: every cart line is checked, in cart order, against the live
   product. Each product is read once. Lines that draw on the same stock pool
   are checked against their combined quantity. The first failing line
   rejects the whole placement before anything is mutated.
3. Commit: stock is taken from the cached products, each touched product is
   saved once, the order is created and the cart is emptied.

Nothing is written unless the unit of work commits. Every saved aggregate is
compare-and-set on its version; when another placement got there first the
commit raises ``ExpectedVersionError`` and protean re-runs this handler from a
fresh read (see ``[server.version_retry]`` in ``domain.toml``).
"""

from collections import defaultdict

from protean import handle
from protean.fields import Dict, Identifier, String
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.errors import Conflict, EmptyCart, InsufficientStock, ProductUnavailable
from storefront.order.order import Order, ShippingAddress
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    user_id: Identifier(required=True)
    shipping_address: Dict()
    idempotency_key: String(max_length=100)


def check_availability(lines, fetch_product):
    """Validate cart ``lines`` against live stock without mutating anything.

    ``fetch_product`` is called at most once per product id and returns the
    product or ``None``. Returns the fetched products keyed by id.

    Raises ``ProductUnavailable``, ``VariantNotFound`` or ``InsufficientStock``
    for the first line that cannot be fulfilled.
    """
    products = {}
    requested = defaultdict(int)

    for line in lines:
        product_id = str(line.product_id)
        if product_id not in products:
            products[product_id] = fetch_product(product_id)

        product = products[product_id]
        if product is None or not product.is_active:
            raise ProductUnavailable(product_id)

        variant_sku = line.variant_sku or None
        available = product.available(variant_sku)

        requested[(product_id, variant_sku)] += line.qty
        if requested[(product_id, variant_sku)] > available:
            raise InsufficientStock(product_id, variant_sku, available)

    return products


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        shipping_address = ShippingAddress.from_payload(command.shipping_address)
        orders = current_domain.repository_for(Order)

        if command.idempotency_key:
            existing = orders.by_idempotency_key(command.user_id, command.idempotency_key)
            if existing is not None:
                logger.info(
                    "order_replayed",
                    user_id=str(command.user_id),
                    order_id=str(existing.id),
                    idempotency_key=command.idempotency_key,
                )
                return str(existing.id)

        carts = current_domain.repository_for(Cart)
        cart = carts.for_user(command.user_id)
        if cart is None or cart.is_empty:
            raise EmptyCart()

        lines = cart.lines
        product_repo = current_domain.repository_for(Product)

        try:
            products = check_availability(lines, product_repo.find_active)
        except Conflict as exc:
            logger.warning(
                "order_rejected",
                user_id=str(command.user_id),
                reason=exc.code,
                detail=exc.data,
            )
            raise

        for line in lines:
            product = products[str(line.product_id)]
            product.reserve(line.qty, variant_sku=line.variant_sku or None)
            logger.debug(
                "stock_decremented",
                product_id=str(product.id),
                variant_sku=line.variant_sku or None,
                qty=line.qty,
            )
        for product in products.values():
            product_repo.add(product)

        order = Order.create(
            user_id=command.user_id,
            lines=lines,
            shipping_address=shipping_address,
            shipping=current_domain.SHIPPING_FLAT,
            idempotency_key=command.idempotency_key or None,
        )
        orders.add(order)

        cart.clear()
        carts.add(cart)

        logger.info(
            "order_placed",
            user_id=str(command.user_id),
            order_id=str(order.id),
            items=len(order.items),
            total=order.amounts.total,
        )
        return str(order.id)
