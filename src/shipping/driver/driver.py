"""Driver aggregate (CQRS).

Drivers are created, edited and deleted freely by administrators. Nothing
links a driver back to the shipments that reference it, and nothing caps how
many active shipments one driver may carry.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String

from shipping.domain import shipping


class VehicleType(Enum):
    CAR = "car"
    VAN = "van"
    TRUCK = "truck"
    MOTORCYCLE = "motorcycle"


class DriverStatus(Enum):
    AVAILABLE = "available"
    BUSY = "busy"
    OFFLINE = "offline"


# Fields an administrator may edit through UpdateDriver
EDITABLE_FIELDS = (
    "name",
    "email",
    "phone",
    "address",
    "license_number",
    "vehicle_type",
    "status",
)


@shipping.event(part_of="Driver")
class DriverRegistered:
    """A driver was added to the roster."""

    __version__ = 1

    driver_id = Identifier(required=True)
    name = String(required=True)
    vehicle_type = String(required=True)
    registered_at = DateTime(required=True)


@shipping.event(part_of="Driver")
class DriverDetailsUpdated:
    """One or more driver fields were edited."""

    __version__ = 1

    driver_id = Identifier(required=True)
    changed_fields = String(required=True)  # comma-separated field names
    status = String(required=True)
    updated_at = DateTime(required=True)


@shipping.aggregate
class Driver:
    name = String(required=True, max_length=200)
    email = String(required=True, max_length=254)
    phone = String(required=True, max_length=30)
    address = String(max_length=500)
    license_number = String(required=True, max_length=50)
    vehicle_type = String(
        max_length=20,
        choices=VehicleType,
        default=VehicleType.CAR.value,
    )
    status = String(
        max_length=20,
        choices=DriverStatus,
        default=DriverStatus.AVAILABLE.value,
    )
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(
        cls,
        name: str,
        email: str,
        phone: str,
        license_number: str,
        address: str | None = None,
        vehicle_type: str | None = None,
        status: str | None = None,
    ):
        now = datetime.now(UTC)
        driver = cls(
            name=name,
            email=email,
            phone=phone,
            address=address,
            license_number=license_number,
            vehicle_type=vehicle_type or VehicleType.CAR.value,
            status=status or DriverStatus.AVAILABLE.value,
            created_at=now,
            updated_at=now,
        )
        driver.raise_(
            DriverRegistered(
                driver_id=str(driver.id),
                name=name,
                vehicle_type=driver.vehicle_type,
                registered_at=now,
            )
        )
        return driver

    def update_details(self, **changes) -> None:
        """Merge the given fields; unknown fields are rejected."""
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError({field: ["Field cannot be updated"] for field in sorted(unknown)})
        if not changes:
            return

        now = datetime.now(UTC)
        for field, value in changes.items():
            setattr(self, field, value)
        self.updated_at = now

        self.raise_(
            DriverDetailsUpdated(
                driver_id=str(self.id),
                changed_fields=",".join(sorted(changes)),
                status=self.status,
                updated_at=now,
            )
        )
