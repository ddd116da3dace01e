"""Cart read side: the user's cart with lines joined to live product data."""

from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalogue.product import Product


def cart_for(user_id) -> Cart:
    """The persisted cart, or an empty unsaved one when the user has none."""
    return current_domain.repository_for(Cart).for_user(user_id) or Cart.create(user_id)


def expanded_lines(cart: Cart) -> list[tuple]:
    """Pair each line, in cart order, with its live product.

    Products are read once per distinct id. A line whose product has been
    removed from the catalogue is paired with ``None``.
    """
    lines = cart.lines
    product_ids = list({str(line.product_id) for line in lines})
    products = {}
    if product_ids:
        results = current_domain.repository_for(Product).query.filter(id__in=product_ids).limit(None).all()
        products = {str(p.id): p for p in results.items}

    return [(line, products.get(str(line.product_id))) for line in lines]
