"""Bakery bounded context — orders, baker assignment and promotions.

Handles the order lifecycle (status machine and baker assignment), the
baker-promotion application workflow, customer reviews of delivered
orders, and the advisory messaging/notification side channel.
"""

import structlog
from protean.domain import Domain

from bakery.utils.logging import configure_logging

configure_logging()

bakery = Domain(name="bakery")

logger = structlog.get_logger(__name__)
