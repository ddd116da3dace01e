"""Shared BDD fixtures and step definitions for the cart."""

import pytest
from pytest_bdd import given, parsers

from storefront.cart.cart import Cart
from storefront.catalogue.product import Product


@pytest.fixture()
def products():
    """Products of the scenario, by title."""
    return {}


@pytest.fixture()
def error():
    """Container for a rejected cart change."""
    return {"exc": None}


@given("an empty cart", target_fixture="cart")
def empty_cart():
    cart = Cart.create("user-1")
    cart._events.clear()
    return cart


@given(parsers.cfparse('a product "{title}" priced {price:f} with stock {stock:d}'))
def simple_product(products, title, price, stock):
    products[title] = Product.create(title=title, price=price, stock=stock)


@given(parsers.cfparse('a product "{title}" priced {price:f} with variants "{skus}"'))
def variant_product(products, title, price, skus):
    product = Product.create(title=title, price=price)
    for sku in skus.split(","):
        product.add_variant(sku.strip(), stock=1)
    products[title] = product
