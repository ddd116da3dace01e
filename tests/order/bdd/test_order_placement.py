"""BDD tests for order placement."""

from protean.utils.globals import current_domain
from pytest_bdd import parsers, scenarios, then, when

from storefront.cart.cart import Cart
from storefront.catalogue.product import Product
from storefront.errors import Conflict, EmptyCart, InsufficientStock
from storefront.order.order import Order
from storefront.order.placement import PlaceOrder

scenarios("features/order_placement.feature")

ADDRESS = {"line1": "12 MG Road", "city": "Bengaluru", "state": "KA", "zip": "560001"}


def _place(user_id, placed, error, idempotency_key=None):
    try:
        placed.append(
            current_domain.process(
                PlaceOrder(user_id=user_id, shipping_address=ADDRESS, idempotency_key=idempotency_key),
                asynchronous=False,
            )
        )
    except Conflict as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the shopper places an order")
def place_order(user_id, placed, error):
    _place(user_id, placed, error)


@when(parsers.cfparse('the shopper places an order with key "{key}"'))
def place_order_with_key(user_id, placed, error, key):
    _place(user_id, placed, error, idempotency_key=key)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("an order totalling {total:f} is placed"))
def order_placed(placed, error, total):
    assert error["exc"] is None
    order = current_domain.repository_for(Order).get(placed[-1])
    assert order.amounts.total == total


@then(parsers.cfparse('product "{title}" has {stock:d} in stock'))
def product_stock(products, title, stock):
    assert current_domain.repository_for(Product).get(products[title]).stock == stock


@then(parsers.cfparse('variant "{sku}" of "{title}" has {stock:d} in stock'))
def variant_stock(products, title, sku, stock):
    assert current_domain.repository_for(Product).get(products[title]).variant(sku).stock == stock


@then("the shopper's cart is empty")
def cart_is_empty(user_id):
    assert current_domain.repository_for(Cart).for_user(user_id).is_empty


@then(parsers.cfparse("the shopper's cart has {count:d} lines"))
def cart_lines(user_id, count):
    assert len(current_domain.repository_for(Cart).for_user(user_id).items) == count


@then(
    parsers.cfparse(
        'the order is rejected for insufficient stock of variant "{sku}" of "{title}" with {available:d} available'
    )
)
def rejected_for_stock(products, error, title, sku, available):
    exc = error["exc"]
    assert isinstance(exc, InsufficientStock)
    assert exc.data == {"product": products[title], "variantSku": sku, "available": available}


@then("the order is rejected because the cart is empty")
def rejected_for_empty_cart(error):
    assert isinstance(error["exc"], EmptyCart)


@then(parsers.cfparse("the shopper has {count:d} order"))
def order_count(user_id, count):
    assert len(current_domain.repository_for(Order).query.filter(user_id=user_id).all().items) == count
