import pytest
from protean.utils.globals import current_domain

from storefront.cart.items import AddToCart
from storefront.errors import InvalidInput, NotFound
from storefront.order.history import get_order, list_orders
from storefront.order.order import Order
from storefront.order.placement import PlaceOrder

ADDRESS = {"line1": "12 MG Road", "city": "Bengaluru", "state": "KA", "zip": "560001"}


def _order(user_id, product_id, qty=1):
    current_domain.process(AddToCart(user_id=user_id, product_id=product_id, qty=qty), asynchronous=False)
    return current_domain.process(PlaceOrder(user_id=user_id, shipping_address=ADDRESS), asynchronous=False)


@pytest.fixture()
def tee(create_product):
    return create_product(title="Plain Tee", price=10.0, stock=50)


class TestListOrders:
    def test_newest_first(self, tee):
        first = _order("user-1", tee, qty=1)
        second = _order("user-1", tee, qty=2)

        page = list_orders("user-1")
        assert [str(o.id) for o in page.items] == [second, first]
        assert page.total == 2

    def test_only_own_orders(self, tee):
        _order("user-1", tee)
        _order("user-2", tee)

        assert list_orders("user-1").total == 1

    def test_pagination(self, tee):
        ids = [_order("user-1", tee) for _ in range(3)]

        page = list_orders("user-1", page=2, limit=2)
        assert [str(o.id) for o in page.items] == [ids[0]]
        assert page.pages == 2

    def test_filter_by_status(self, tee):
        order_id = _order("user-1", tee)
        _order("user-1", tee)

        repo = current_domain.repository_for(Order)
        order = repo.get(order_id)
        order.status = "paid"
        repo.add(order)

        assert [str(o.id) for o in list_orders("user-1", status="paid").items] == [order_id]
        assert list_orders("user-1", status="created").total == 1

    def test_unknown_status(self):
        with pytest.raises(InvalidInput):
            list_orders("user-1", status="lost")


class TestGetOrder:
    def test_get_own_order(self, tee):
        order_id = _order("user-1", tee)
        assert str(get_order("user-1", order_id).id) == order_id

    def test_orders_of_other_users_are_not_found(self, tee):
        order_id = _order("user-1", tee)
        with pytest.raises(NotFound):
            get_order("user-2", order_id)

    def test_missing_order(self):
        with pytest.raises(NotFound):
            get_order("user-1", "missing")
