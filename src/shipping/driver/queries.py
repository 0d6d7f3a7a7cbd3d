"""Read-side queries over the driver roster (admin only)."""

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from shipping.access.gate import Operation, authorize
from shipping.driver.driver import Driver, DriverStatus

_SEARCHABLE_FIELDS = ("name", "email", "phone", "license_number")


def list_drivers(caller_id: str, search: str | None = None, status: str | None = None) -> list[Driver]:
    authorize(caller_id, Operation.VIEW_DRIVERS)

    status_filter = None
    if status and status != "all":
        try:
            status_filter = DriverStatus(status)
        except ValueError:
            raise ValidationError({"status": [f"Invalid driver status '{status}'"]}) from None

    drivers = current_domain.repository_for(Driver).roster(status_filter)
    if not search:
        return drivers
    needle = search.strip().lower()
    return [d for d in drivers if any(needle in (getattr(d, name) or "").lower() for name in _SEARCHABLE_FIELDS)]


def get_driver(caller_id: str, driver_id: str) -> Driver:
    authorize(caller_id, Operation.VIEW_DRIVERS)
    return current_domain.repository_for(Driver).load(driver_id)
