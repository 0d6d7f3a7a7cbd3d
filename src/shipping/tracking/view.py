"""Tracking view: everything the tracking page shows for one shipment.

Assembles the shipment, a tolerant driver lookup, the status timeline and
the location projection. Geocoding problems degrade to a message instead of
failing the page.
"""

from dataclasses import dataclass, field
from datetime import datetime

import structlog
from protean.utils.globals import current_domain

from shipping.driver.driver import Driver
from shipping.errors import GeocodeUnavailable
from shipping.shipment.queries import find_by_tracking_code
from shipping.shipment.shipment import ShipmentStatus
from shipping.tracking.location import LocationProjector, LocationView

logger = structlog.get_logger(__name__)

NOT_ASSIGNED = "Not Assigned"
UNKNOWN_DRIVER = "Unknown Driver"
LOCATION_UNAVAILABLE = "Location unavailable"

STATUS_LABELS = {
    ShipmentStatus.PENDING.value: "Pending",
    ShipmentStatus.IN_TRANSIT.value: "In Transit",
    ShipmentStatus.DELIVERED.value: "Delivered",
}

STATUS_DESCRIPTIONS = {
    ShipmentStatus.PENDING.value: "Your shipment has been registered and is awaiting processing",
    ShipmentStatus.IN_TRANSIT.value: "Your shipment is on its way to the destination",
    ShipmentStatus.DELIVERED.value: "Your shipment has been delivered successfully",
}


@dataclass(frozen=True)
class DriverCard:
    name: str
    phone: str | None = None
    vehicle_type: str | None = None
    assigned: bool = False


@dataclass(frozen=True)
class TimelineStep:
    title: str
    reached: bool
    at: datetime | None = None
    note: str | None = None


@dataclass
class TrackingView:
    shipment: object
    status_label: str
    status_description: str
    driver: DriverCard
    timeline: list[TimelineStep] = field(default_factory=list)
    location: LocationView | None = None
    location_message: str | None = None


def driver_card(driver_id: str | None) -> tuple[DriverCard, Driver | None]:
    if not driver_id:
        return DriverCard(name=NOT_ASSIGNED), None
    driver = current_domain.repository_for(Driver).find(driver_id)
    if driver is None:
        logger.info("Shipment references a missing driver", driver_id=driver_id)
        return DriverCard(name=UNKNOWN_DRIVER, assigned=True), None
    return DriverCard(name=driver.name, phone=driver.phone, vehicle_type=driver.vehicle_type, assigned=True), driver


def build_timeline(shipment) -> list[TimelineStep]:
    departed = shipment.status in (ShipmentStatus.IN_TRANSIT.value, ShipmentStatus.DELIVERED.value)
    delivered = shipment.status == ShipmentStatus.DELIVERED.value
    return [
        TimelineStep(title="Shipment Created", reached=True, at=shipment.created_at),
        TimelineStep(
            title="In Transit",
            reached=departed,
            at=shipment.transit_date if departed else None,
            note=STATUS_DESCRIPTIONS[ShipmentStatus.IN_TRANSIT.value] if departed else "Pending",
        ),
        TimelineStep(
            title="Delivered",
            reached=delivered,
            at=shipment.delivery_date if delivered else None,
            note=STATUS_DESCRIPTIONS[ShipmentStatus.DELIVERED.value] if delivered else "Pending",
        ),
    ]


def track_shipment(caller_id: str, tracking_code: str, projector: LocationProjector | None = None) -> TrackingView:
    """Build the tracking view for ``tracking_code``.

    Raises:
        ObjectNotFoundError: no shipment carries the code.
        PermissionDenied: the caller neither owns the shipment nor is an admin.
    """
    shipment = find_by_tracking_code(caller_id, tracking_code)
    card, driver = driver_card(shipment.driver_id)

    view = TrackingView(
        shipment=shipment,
        status_label=STATUS_LABELS.get(shipment.status, "Unknown"),
        status_description=STATUS_DESCRIPTIONS.get(shipment.status, ""),
        driver=card,
        timeline=build_timeline(shipment),
    )

    projector = projector or LocationProjector()
    try:
        view.location = projector.project(shipment, driver)
    except GeocodeUnavailable as exc:
        logger.warning(
            "Tracking view without location",
            tracking_code=shipment.tracking_code,
            reason=str(exc),
        )
        view.location_message = LOCATION_UNAVAILABLE
    return view
