"""Shipping bounded context: Shipment Lifecycle, Drivers and Tracking.

Tracks a physical shipment from creation to delivery, lets administrators
assign drivers and move shipments through their statuses, and serves the
lookup-by-tracking-code view. Uses CQRS: shipments, drivers and user
profiles are plain aggregates persisted through Protean repositories.
"""

from protean.domain import Domain

from shipping.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
shipping = Domain(name="shipping")
