"""Purchasing bounded context: carts, orders and the purchase flow.

Carts and orders are both item holders. Before either is committed it passes
through a purchase flow: ordered business-rule processors grouped into
validate, prepare and commit phases.
"""

from protean.domain import Domain

from purchasing.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
purchasing = Domain(name="purchasing")
