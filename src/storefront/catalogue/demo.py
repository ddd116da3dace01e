"""Demo catalogue used by ``manage.py seed`` and local development."""

from protean.utils.globals import current_domain

from storefront.catalogue.category import Category
from storefront.catalogue.management import CreateCategory, CreateProduct

DEMO_CATALOGUE = [
    {
        "name": "Fashion",
        "description": "Clothing and accessories",
        "subcategories": [{"name": "T-Shirts"}, {"name": "Shoes"}],
        "products": [
            {
                "title": "Classic Crew T-Shirt",
                "brand": "Urbanwear",
                "subcategory": "T-Shirts",
                "price": 499.0,
                "mrp": 799.0,
                "keywords": ["tee", "cotton"],
                "tags": ["summer", "casual"],
                "popularity": 120,
                "rating_avg": 4.3,
                "rating_count": 210,
                "images": [{"url": "https://img.example.com/tee-red.jpg", "alt": "Red tee"}],
                "variants": [
                    {"sku": "red-M", "color": "red", "size": "M", "stock": 15},
                    {"sku": "red-L", "color": "red", "size": "L", "stock": 8},
                    {"sku": "black-M", "color": "black", "size": "M", "stock": 20},
                ],
            },
            {
                "title": "Trail Running Shoes",
                "brand": "Stride",
                "subcategory": "Shoes",
                "price": 2999.0,
                "mrp": 3999.0,
                "keywords": ["running", "sneakers"],
                "tags": ["sports"],
                "popularity": 85,
                "rating_avg": 4.6,
                "rating_count": 98,
                "images": [{"url": "https://img.example.com/trail.jpg", "alt": "Trail shoes"}],
                "variants": [
                    {"sku": "UK8", "size": "8", "stock": 5},
                    {"sku": "UK9", "size": "9", "stock": 3},
                ],
            },
        ],
    },
    {
        "name": "Electronics",
        "description": "Phones, audio and accessories",
        "subcategories": [{"name": "Audio"}],
        "products": [
            {
                "title": "Wireless Earbuds",
                "brand": "Sonik",
                "subcategory": "Audio",
                "price": 1499.0,
                "mrp": 2499.0,
                "keywords": ["bluetooth", "earphones"],
                "tags": ["audio", "wireless"],
                "popularity": 300,
                "rating_avg": 4.1,
                "rating_count": 1520,
                "stock": 40,
                "images": [{"url": "https://img.example.com/earbuds.jpg", "alt": "Earbuds"}],
            },
            {
                "title": "USB-C Charger 30W",
                "brand": "Voltix",
                "price": 899.0,
                "keywords": ["charger", "adapter"],
                "tags": ["accessories"],
                "popularity": 150,
                "rating_avg": 4.4,
                "rating_count": 430,
                "stock": 60,
            },
        ],
    },
]


def seed_catalogue(catalogue=None) -> dict[str, str]:
    """Create the categories and products of ``catalogue``.

    Must run inside a domain context. Returns product ids keyed by title.
    """
    product_ids = {}

    for entry in catalogue or DEMO_CATALOGUE:
        category_id = current_domain.process(
            CreateCategory(
                name=entry["name"],
                description=entry.get("description"),
                subcategories=entry.get("subcategories", []),
            ),
            asynchronous=False,
        )
        category = current_domain.repository_for(Category).get(category_id)
        subcategories = {s.name: str(s.id) for s in category.subcategories}

        for product in entry.get("products", []):
            fields = {k: v for k, v in product.items() if k != "subcategory"}
            product_ids[product["title"]] = current_domain.process(
                CreateProduct(
                    category_id=category_id,
                    subcategory_id=subcategories.get(product.get("subcategory")),
                    **fields,
                ),
                asynchronous=False,
            )

    return product_ids
