"""Storefront domain: catalogue, accounts, cart, orders and reviews.

Every aggregate is registered on a single domain so that placing an order can
read the cart, decrement product stock and create the order in one unit of
work.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
storefront = Domain(name="storefront")
