"""Domain initialization and configuration.

FreshCart runs as one domain: checkout, cancellation and delivery change
products, carts and orders in the same transaction, and a unit of work
spans a single domain. The bounded contexts are subpackages of this one.
"""

import structlog
from protean.domain import Domain

from freshcart.shared.logging import configure_logging

# Configure logging for the application
configure_logging()

logger = structlog.get_logger(__name__)

# Domain Composition Root
freshcart = Domain(name="freshcart")
