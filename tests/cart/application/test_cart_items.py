"""Application tests for adding and removing cart lines."""

import pytest
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.cart.items import AddToCart, RemoveFromCart
from storefront.cart.view import cart_for, expanded_lines
from storefront.catalogue.management import ChangePrice, DeactivateProduct
from storefront.errors import InvalidInput, NotFound

USER_ID = "user-1"


def _add(product_id, qty=1, **kwargs):
    return current_domain.process(
        AddToCart(user_id=USER_ID, product_id=product_id, qty=qty, **kwargs),
        asynchronous=False,
    )


def _remove(product_id, **kwargs):
    return current_domain.process(
        RemoveFromCart(user_id=USER_ID, product_id=product_id, **kwargs),
        asynchronous=False,
    )


def _cart():
    return current_domain.repository_for(Cart).for_user(USER_ID)


@pytest.fixture()
def tee(create_product):
    return create_product(title="Plain Tee", price=10.0, stock=5)


@pytest.fixture()
def crew(create_product):
    return create_product(
        title="Crew Tee",
        price=20.0,
        stock=0,
        variants=[{"sku": "red-M", "stock": 1}, {"sku": "red-L", "stock": 3}],
    )


class TestAddToCart:
    def test_first_add_creates_the_cart(self, tee):
        assert _cart() is None

        cart_id = _add(tee, qty=2)

        cart = _cart()
        assert str(cart.id) == cart_id
        assert len(cart.items) == 1
        assert cart.items[0].qty == 2

    def test_repeat_adds_merge(self, tee):
        _add(tee, qty=2)
        _add(tee, qty=3)

        cart = _cart()
        assert len(cart.items) == 1
        assert cart.items[0].qty == 5

    def test_line_keeps_price_from_first_add(self, tee):
        _add(tee)
        current_domain.process(ChangePrice(product_id=tee, price=15.0), asynchronous=False)
        _add(tee)

        line = _cart().items[0]
        assert line.price == 10.0
        assert line.qty == 2

    def test_variants_are_separate_lines(self, crew):
        _add(crew, variant_sku="red-M")
        _add(crew, variant_sku="red-L")

        assert sorted(line.variant_sku for line in _cart().items) == ["red-L", "red-M"]

    def test_adding_more_than_stock_is_allowed(self, tee):
        _add(tee, qty=50)
        assert _cart().items[0].qty == 50

    def test_missing_product_is_not_found(self):
        with pytest.raises(NotFound):
            _add("missing-product")
        assert _cart() is None

    def test_inactive_product_is_not_found(self, tee):
        current_domain.process(DeactivateProduct(product_id=tee), asynchronous=False)
        with pytest.raises(NotFound):
            _add(tee)

    @pytest.mark.parametrize("qty", [0, -2])
    def test_quantity_must_be_positive(self, tee, qty):
        with pytest.raises(ValidationError):
            _add(tee, qty=qty)

    def test_variant_product_requires_a_sku(self, crew):
        with pytest.raises(InvalidInput) as exc:
            _add(crew)
        assert exc.value.message == "Please choose a variant"

    def test_simple_product_rejects_a_sku(self, tee):
        with pytest.raises(InvalidInput):
            _add(tee, variant_sku="red-M")

    def test_unknown_sku_is_not_found(self, crew):
        with pytest.raises(NotFound):
            _add(crew, variant_sku="blue-S")
        assert _cart() is None


class TestRemoveFromCart:
    def test_remove_line(self, tee, crew):
        _add(tee)
        _add(crew, variant_sku="red-M")

        _remove(crew, variant_sku="red-M")

        assert [line.product_id for line in _cart().items] == [tee]

    def test_removing_an_absent_line_is_a_no_op(self, tee, crew):
        _add(tee)

        _remove(crew, variant_sku="red-M")

        assert len(_cart().items) == 1

    def test_remove_without_a_cart_is_not_found(self, tee):
        with pytest.raises(NotFound):
            _remove(tee)


class TestCartView:
    def test_user_without_cart_gets_an_empty_unsaved_cart(self):
        cart = cart_for(USER_ID)
        assert cart.is_empty
        assert cart.state_.is_persisted is False

    def test_lines_are_paired_with_live_products(self, tee, crew):
        _add(crew, variant_sku="red-L")
        _add(tee, qty=2)
        current_domain.process(ChangePrice(product_id=tee, price=12.0), asynchronous=False)

        pairs = expanded_lines(cart_for(USER_ID))

        assert [(line.title, product.title) for line, product in pairs] == [
            ("Crew Tee", "Crew Tee"),
            ("Plain Tee", "Plain Tee"),
        ]
        line, product = pairs[1]
        assert line.price == 10.0
        assert product.price == 12.0
