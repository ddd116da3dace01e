"""Domain tests for the Product aggregate and its stock pools."""

import pytest
from protean.exceptions import ValidationError

from storefront.catalogue.product import Product, StockReserved
from storefront.errors import InsufficientStock, VariantNotFound


def _simple_product(**overrides):
    fields = {"title": "Plain Tee", "price": 10.0, "stock": 5}
    fields.update(overrides)
    return Product.create(**fields)


def _variant_product():
    product = Product.create(title="Crew Tee", price=20.0, brand="Urbanwear")
    product.add_variant("red-M", stock=1, color="red", size="M")
    product.add_variant("red-L", stock=4, color="red", size="L")
    return product


class TestProductCreation:
    def test_create_sets_defaults(self):
        product = _simple_product()
        assert product.is_active is True
        assert product.popularity == 0
        assert product.created_at is not None
        assert product.updated_at == product.created_at

    def test_thumb_defaults_to_first_image(self):
        product = _simple_product(images=[{"url": "https://img/1.jpg", "alt": "one"}, {"url": "https://img/2.jpg"}])
        assert product.thumb == "https://img/1.jpg"
        assert [i.url for i in product.images] == ["https://img/1.jpg", "https://img/2.jpg"]

    def test_search_terms_hold_each_value_on_its_own_line(self):
        product = _simple_product(title="Crew Tee", brand="Urbanwear", keywords=["Cotton"], tags=["Summer"])
        assert product.search_terms.split("\n") == ["crew tee", "urbanwear", "cotton", "summer"]

    def test_retagging_refreshes_search_terms(self):
        product = _simple_product(title="Crew Tee")
        product.tag(tags=["Festive"])
        assert "festive" in product.search_terms

    def test_negative_price_is_rejected(self):
        with pytest.raises(ValidationError):
            _simple_product(price=-1.0)

    def test_negative_stock_is_rejected(self):
        with pytest.raises(ValidationError):
            _simple_product(stock=-1)


class TestDisplayValues:
    def test_discount_percent(self):
        assert _simple_product(price=75.0, mrp=100.0).discount_percent == 25

    def test_no_discount_without_mrp_above_price(self):
        assert _simple_product(price=75.0).discount_percent == 0
        assert _simple_product(price=75.0, mrp=50.0).discount_percent == 0

    def test_in_stock_for_simple_product(self):
        assert _simple_product(stock=1).in_stock is True
        assert _simple_product(stock=0).in_stock is False

    def test_in_stock_for_variant_product(self):
        product = Product.create(title="Crew Tee", price=20.0)
        product.add_variant("red-M", stock=0)
        assert product.in_stock is False

        product.add_variant("red-L", stock=2)
        assert product.in_stock is True


class TestVariants:
    def test_duplicate_sku_is_rejected(self):
        product = _variant_product()
        with pytest.raises(ValidationError) as exc:
            product.add_variant("red-M", stock=3)
        assert "sku" in exc.value.messages

    def test_variant_products_hold_no_base_stock(self):
        product = _simple_product(stock=5)
        with pytest.raises(ValidationError) as exc:
            product.add_variant("red-M", stock=1)
        assert "stock" in exc.value.messages

    def test_variant_lookup(self):
        product = _variant_product()
        assert product.variant("red-L").stock == 4
        assert product.variant("blue-S") is None


class TestStockPools:
    def test_simple_product_sells_from_base_stock(self):
        assert _simple_product(stock=5).available() == 5

    def test_variant_pool(self):
        assert _variant_product().available("red-L") == 4

    def test_variant_product_without_sku_has_nothing_to_sell(self):
        assert _variant_product().available() == 0

    def test_unknown_sku_raises_variant_not_found(self):
        product = _variant_product()
        with pytest.raises(VariantNotFound) as exc:
            product.available("blue-S")
        assert exc.value.data == {"product": str(product.id), "variantSku": "blue-S", "available": 0}

    def test_reserve_from_base_stock(self):
        product = _simple_product(stock=5)
        product.reserve(2)
        assert product.stock == 3

    def test_reserve_from_variant(self):
        product = _variant_product()
        product.reserve(1, variant_sku="red-M")
        assert product.variant("red-M").stock == 0
        assert product.variant("red-L").stock == 4
        assert product.stock == 0

    def test_reserve_raises_stock_reserved_event(self):
        product = _simple_product(stock=5)
        product._events.clear()
        product.reserve(2)

        assert len(product._events) == 1
        event = product._events[0]
        assert isinstance(event, StockReserved)
        assert event.quantity == 2
        assert event.remaining == 3

    def test_reserve_refuses_to_go_negative(self):
        product = _variant_product()
        with pytest.raises(InsufficientStock) as exc:
            product.reserve(2, variant_sku="red-M")

        assert exc.value.available == 1
        assert exc.value.variant_sku == "red-M"
        assert product.variant("red-M").stock == 1

    def test_restock_base_stock(self):
        product = _simple_product(stock=1)
        product.restock(4)
        assert product.stock == 5

    def test_restock_variant(self):
        product = _variant_product()
        product.restock(3, variant_sku="red-M")
        assert product.variant("red-M").stock == 4

    def test_restock_variant_product_requires_sku(self):
        with pytest.raises(ValidationError):
            _variant_product().restock(3)

    def test_restock_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            _simple_product().restock(0)
