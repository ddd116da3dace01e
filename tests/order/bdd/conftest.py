"""Shared BDD fixtures and step definitions for order placement."""

import pytest
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers

from storefront.cart.items import AddToCart


@pytest.fixture()
def user_id():
    return "user-1"


@pytest.fixture()
def products():
    """Ids of the scenario's products, by title."""
    return {}


@pytest.fixture()
def error():
    """Container for a rejected placement."""
    return {"exc": None}


@pytest.fixture()
def placed():
    """Ids returned by each placement, in order."""
    return []


@given(parsers.cfparse('a product "{title}" priced {price:f} with stock {stock:d}'))
def simple_product(create_product, products, title, price, stock):
    products[title] = create_product(title=title, price=price, stock=stock)


@given(parsers.cfparse('a product "{title}" priced {price:f} with variant "{sku}" stocked {stock:d}'))
def variant_product(create_product, products, title, price, sku, stock):
    products[title] = create_product(title=title, price=price, stock=0, variants=[{"sku": sku, "stock": stock}])


@given(parsers.cfparse('the shopper has {qty:d} of "{title}" in the cart'))
def product_in_cart(user_id, products, title, qty):
    current_domain.process(AddToCart(user_id=user_id, product_id=products[title], qty=qty), asynchronous=False)


@given(parsers.cfparse('the shopper has {qty:d} of variant "{sku}" of "{title}" in the cart'))
def variant_in_cart(user_id, products, title, sku, qty):
    current_domain.process(
        AddToCart(user_id=user_id, product_id=products[title], qty=qty, variant_sku=sku),
        asynchronous=False,
    )
