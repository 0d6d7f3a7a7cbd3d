"""Read-side queries over shipments.

Each query runs the caller through the authorization gate first. Lists are
newest first.
"""

from dataclasses import dataclass, field

from protean.utils.globals import current_domain

from shipping import settings
from shipping.access.gate import Operation, authorize
from shipping.shipment.shipment import Shipment, ShipmentStatus, parse_status

_SEARCHABLE_FIELDS = ("tracking_code", "package_name", "destination", "recipient_name")


def _status_filter(status) -> ShipmentStatus | None:
    if status is None or status == "" or status == "all":
        return None
    return parse_status(status)


def matches_search(shipment: Shipment, search: str | None) -> bool:
    """Case-insensitive substring match on the searchable shipment fields."""
    if not search:
        return True
    needle = search.strip().lower()
    return any(needle in (getattr(shipment, name) or "").lower() for name in _SEARCHABLE_FIELDS)


def get_shipment(caller_id: str, shipment_id: str) -> Shipment:
    shipment = current_domain.repository_for(Shipment).load(shipment_id)
    authorize(caller_id, Operation.VIEW_SHIPMENT, shipment)
    return shipment


def find_by_tracking_code(caller_id: str, tracking_code: str) -> Shipment:
    """Look a shipment up by tracking code; owners and admins only."""
    shipment = current_domain.repository_for(Shipment).find_by_tracking_code(tracking_code.strip().upper())
    authorize(caller_id, Operation.VIEW_SHIPMENT, shipment)
    return shipment


def list_for_owner(caller_id: str, status=None, search: str | None = None) -> list[Shipment]:
    """The caller's own shipments."""
    authorize(caller_id, Operation.VIEW_OWN_SHIPMENTS)
    shipments = current_domain.repository_for(Shipment).for_owner(caller_id, _status_filter(status))
    return [s for s in shipments if matches_search(s, search)]


def list_all(caller_id: str, status=None, search: str | None = None) -> list[Shipment]:
    """Every shipment in the system (admin)."""
    authorize(caller_id, Operation.LIST_ALL_SHIPMENTS)
    shipments = current_domain.repository_for(Shipment).everything(_status_filter(status))
    return [s for s in shipments if matches_search(s, search)]


@dataclass
class DashboardSummary:
    total: int = 0
    pending: int = 0
    in_transit: int = 0
    delivered: int = 0
    recent: list[Shipment] = field(default_factory=list)


def dashboard_summary(caller_id: str) -> DashboardSummary:
    """Status counts and the most recent shipments for the caller."""
    shipments = list_for_owner(caller_id)
    summary = DashboardSummary(total=len(shipments))
    for shipment in shipments:
        if shipment.status == ShipmentStatus.PENDING.value:
            summary.pending += 1
        elif shipment.status == ShipmentStatus.IN_TRANSIT.value:
            summary.in_transit += 1
        elif shipment.status == ShipmentStatus.DELIVERED.value:
            summary.delivered += 1
    summary.recent = shipments[: settings.RECENT_ACTIVITY_LIMIT]
    return summary
