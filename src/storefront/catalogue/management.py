"""Catalogue management: commands and handlers for categories and products.

There is no public HTTP surface for these; they are issued by ``manage.py seed``
and by back-office tooling.
"""

from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, List, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category import Category
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.errors import NotFound
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=100)
    description: Text()
    image_url: String(max_length=1000)
    is_active: Boolean(default=True)
    subcategories: List()


@storefront.command(part_of="Category")
class DeactivateCategory:
    category_id: Identifier(required=True)


@storefront.command_handler(part_of=Category)
class ManageCategoriesHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        category = Category.create(
            name=command.name,
            description=command.description,
            image_url=command.image_url,
            is_active=command.is_active,
        )
        for sub in command.subcategories or []:
            category.add_subcategory(
                name=sub["name"],
                image_url=sub.get("image_url"),
                is_active=sub.get("is_active", True),
            )

        current_domain.repository_for(Category).add(category)
        logger.info("category_created", category_id=str(category.id), name=category.name)
        return str(category.id)

    @handle(DeactivateCategory)
    def deactivate_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)
        category.deactivate()
        repo.add(category)


@storefront.command(part_of="Product")
class CreateProduct:
    title: String(required=True, max_length=255)
    price: Float(required=True, min_value=0.0)
    brand: String(max_length=100)
    category_id: Identifier()
    subcategory_id: Identifier()
    description: Text()
    keywords: List(String(max_length=100))
    tags: List(String(max_length=100))
    mrp: Float(min_value=0.0)
    stock: Integer(default=0, min_value=0)
    variants: List()
    images: List()
    thumb: String(max_length=1000)
    popularity: Integer(default=0, min_value=0)
    rating_avg: Float(default=0.0)
    rating_count: Integer(default=0)
    is_active: Boolean(default=True)


@storefront.command(part_of="Product")
class AddVariant:
    product_id: Identifier(required=True)
    sku: String(required=True, max_length=64)
    color: String(max_length=50)
    size: String(max_length=20)
    stock: Integer(default=0, min_value=0)


@storefront.command(part_of="Product")
class RestockProduct:
    product_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)
    variant_sku: String(max_length=64)


@storefront.command(part_of="Product")
class ChangePrice:
    product_id: Identifier(required=True)
    price: Float(required=True, min_value=0.0)
    mrp: Float(min_value=0.0)


@storefront.command(part_of="Product")
class DeactivateProduct:
    product_id: Identifier(required=True)


@storefront.command_handler(part_of=Product)
class ManageProductsHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        if command.category_id:
            category = current_domain.repository_for(Category).get(command.category_id)
            if command.subcategory_id and not category.has_subcategory(command.subcategory_id):
                raise NotFound("Subcategory not found")

        product = Product.create(
            title=command.title,
            price=command.price,
            brand=command.brand,
            category_id=command.category_id,
            subcategory_id=command.subcategory_id,
            description=command.description,
            keywords=command.keywords,
            tags=command.tags,
            mrp=command.mrp,
            stock=0 if command.variants else command.stock,
            images=command.images,
            thumb=command.thumb,
            popularity=command.popularity,
            rating_avg=command.rating_avg,
            rating_count=command.rating_count,
            is_active=command.is_active,
        )
        for variant in command.variants or []:
            product.add_variant(
                sku=variant["sku"],
                stock=variant.get("stock", 0),
                color=variant.get("color"),
                size=variant.get("size"),
            )

        current_domain.repository_for(Product).add(product)
        logger.info("product_created", product_id=str(product.id), title=product.title)
        return str(product.id)

    @handle(AddVariant)
    def add_variant(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.add_variant(
            sku=command.sku,
            stock=command.stock,
            color=command.color,
            size=command.size,
        )
        repo.add(product)

    @handle(RestockProduct)
    def restock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.restock(command.quantity, variant_sku=command.variant_sku)
        repo.add(product)

    @handle(ChangePrice)
    def change_price(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.change_price(command.price, mrp=command.mrp)
        repo.add(product)

    @handle(DeactivateProduct)
    def deactivate(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.deactivate()
        repo.add(product)
