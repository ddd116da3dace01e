"""Order history queries for the signed-in user."""

from protean.utils.globals import current_domain

from storefront.catalogue.queries import Page
from storefront.errors import InvalidInput, NotFound
from storefront.order.order import Order, OrderStatus


def list_orders(user_id, status=None, page=None, limit=None) -> Page:
    if status and status not in {s.value for s in OrderStatus}:
        raise InvalidInput(f"Unknown order status: {status}", {"status": ["Unknown order status"]})

    page = max(1, int(page or 1))
    limit = current_domain.SEARCH_DEFAULT_LIMIT if limit is None else int(limit)
    limit = min(max(1, limit), current_domain.SEARCH_MAX_LIMIT)

    results = current_domain.repository_for(Order).history(
        user_id, status=status, offset=(page - 1) * limit, limit=limit
    )
    return Page(items=list(results.items), page=page, limit=limit, total=results.total)


def get_order(user_id, order_id) -> Order:
    """An order of ``user_id``. Orders of other users are reported as missing."""
    order = current_domain.repository_for(Order).owned_by(user_id, order_id)
    if order is None:
        raise NotFound("Order not found")
    return order
