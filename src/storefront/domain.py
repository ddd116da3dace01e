"""Storefront domain: catalogue, shopping cart, orders and customer accounts.

All aggregates live in one domain so that order placement can read and write
the cart, the products it draws stock from and the new order inside a single
unit of work.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
storefront = Domain(name="storefront")
