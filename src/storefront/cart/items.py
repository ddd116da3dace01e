"""Cart item management: commands and handler."""

from protean import handle
from protean.fields import Dict, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.errors import InvalidInput, NotFound
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Cart")
class AddToCart:
    user_id: Identifier(required=True)
    product_id: Identifier(required=True)
    qty: Integer(required=True, min_value=1)
    variant_sku: String(max_length=64)
    meta: Dict()


@storefront.command(part_of="Cart")
class RemoveFromCart:
    user_id: Identifier(required=True)
    product_id: Identifier(required=True)
    variant_sku: String(max_length=64)


@storefront.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = current_domain.repository_for(Product).find_active(command.product_id)
        if product is None:
            raise NotFound("Product not found")

        variant_sku = command.variant_sku or None
        if product.variants and variant_sku is None:
            raise InvalidInput(
                "Please choose a variant",
                {"variantSku": ["A variant is required for this product"]},
            )
        if not product.variants and variant_sku is not None:
            raise InvalidInput(
                "This product has no variants",
                {"variantSku": ["This product has no variants"]},
            )
        if variant_sku is not None and product.variant(variant_sku) is None:
            raise NotFound("Variant not found")

        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id) or Cart.create(command.user_id)
        line = cart.add_line(product, command.qty, variant_sku=variant_sku, meta=command.meta)
        repo.add(cart)

        logger.info(
            "cart_item_added",
            user_id=str(command.user_id),
            product_id=str(product.id),
            variant_sku=variant_sku,
            qty=command.qty,
            line_qty=line.qty,
        )
        return str(cart.id)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id)
        if cart is None:
            raise NotFound("Cart not found")

        if cart.remove_line(command.product_id, command.variant_sku):
            repo.add(cart)
            logger.info(
                "cart_item_removed",
                user_id=str(command.user_id),
                product_id=str(command.product_id),
                variant_sku=command.variant_sku or None,
            )
        return str(cart.id)
