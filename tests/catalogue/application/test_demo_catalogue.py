from protean.utils.globals import current_domain

from storefront.catalogue import queries
from storefront.catalogue.demo import DEMO_CATALOGUE, seed_catalogue
from storefront.catalogue.product import Product


class TestSeedCatalogue:
    def test_seeds_every_category_and_product(self):
        product_ids = seed_catalogue()

        assert [c.name for c in queries.categories()] == sorted(entry["name"] for entry in DEMO_CATALOGUE)
        assert len(product_ids) == sum(len(entry.get("products", [])) for entry in DEMO_CATALOGUE)

    def test_products_land_in_their_subcategory(self):
        product_ids = seed_catalogue()

        tee = current_domain.repository_for(Product).get(product_ids["Classic Crew T-Shirt"])
        assert tee.subcategory_id is not None
        assert {v.sku for v in tee.variants} == {"red-M", "red-L", "black-M"}
        assert tee.stock == 0

    def test_custom_catalogue(self):
        product_ids = seed_catalogue(
            [{"name": "Books", "products": [{"title": "Field Guide", "price": 350.0, "stock": 4}]}]
        )

        assert list(product_ids) == ["Field Guide"]
        assert current_domain.repository_for(Product).get(product_ids["Field Guide"]).stock == 4
