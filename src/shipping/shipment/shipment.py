"""Shipment aggregate (CQRS), the core of the shipping domain.

State Machine:
    pending → in_transit → delivered

Administrators work from a free-form status selector rather than a strict
workflow, so ``change_status`` accepts any of the three states, including
backward moves. The forward steps above are recorded as regular transitions;
anything else is flagged as an override on the emitted event.

Timestamps are stamped once: the first move into ``in_transit`` sets
``transit_date`` and the first move into ``delivered`` sets ``delivery_date``.
Later moves never overwrite or clear them.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from shipping.domain import shipping
from shipping.errors import InvalidStatus, StaleShipment
from shipping.shipment.events import (
    DriverAssigned,
    DriverUnassigned,
    RecipientDetailsUpdated,
    ShipmentCreated,
    ShipmentStatusChanged,
)

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


class ShipmentStatus(Enum):
    PENDING = "pending"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"


class PackageType(Enum):
    STANDARD = "standard"
    FRAGILE = "fragile"
    PERISHABLE = "perishable"
    HAZARDOUS = "hazardous"


class DeliverySpeed(Enum):
    STANDARD = "standard"
    EXPRESS = "express"
    SAME_DAY = "same_day"


_FORWARD_TRANSITIONS = {
    ShipmentStatus.PENDING: {ShipmentStatus.IN_TRANSIT},
    ShipmentStatus.IN_TRANSIT: {ShipmentStatus.DELIVERED},
    ShipmentStatus.DELIVERED: set(),  # terminal
}

# Statuses at or beyond the point where the shipment left the origin
_DEPARTED_STATUSES = {ShipmentStatus.IN_TRANSIT, ShipmentStatus.DELIVERED}


def parse_status(value) -> ShipmentStatus:
    """Map a raw status value to ``ShipmentStatus`` or raise ``InvalidStatus``."""
    if isinstance(value, ShipmentStatus):
        return value
    try:
        return ShipmentStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in ShipmentStatus)
        raise InvalidStatus({"status": [f"Invalid status '{value}'. Expected one of: {allowed}"]}) from None


@shipping.aggregate
class Shipment:
    tracking_code = String(required=True, max_length=9, unique=True)
    owner_id = Identifier(required=True)
    status = String(
        max_length=20,
        choices=ShipmentStatus,
        default=ShipmentStatus.PENDING.value,
    )
    driver_id = Identifier()
    origin = String(required=True, max_length=500)
    destination = String(required=True, max_length=500)
    package_name = String(required=True, max_length=200)
    package_description = Text()
    weight = Float(min_value=0.0)
    dimensions = String(max_length=100)
    package_type = String(
        max_length=20,
        choices=PackageType,
        default=PackageType.STANDARD.value,
    )
    delivery_speed = String(
        max_length=20,
        choices=DeliverySpeed,
        default=DeliverySpeed.STANDARD.value,
    )
    recipient_name = String(required=True, max_length=200)
    recipient_phone = String(required=True, max_length=30)
    recipient_email = String(max_length=254)
    payment_reference = String(required=True, max_length=255)
    revision = Integer(default=0, min_value=0)
    created_at = DateTime()
    updated_at = DateTime()
    transit_date = DateTime()
    delivery_date = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def departed_shipment_has_transit_date(self):
        if self.status in {s.value for s in _DEPARTED_STATUSES} and self.transit_date is None:
            raise ValidationError({"transit_date": ["A shipment in transit or delivered must have a transit date"]})

    @invariant.post
    def delivered_shipment_has_delivery_date(self):
        if self.status == ShipmentStatus.DELIVERED.value and self.delivery_date is None:
            raise ValidationError({"delivery_date": ["A delivered shipment must have a delivery date"]})

    @invariant.post
    def timestamps_are_causal(self):
        if self.created_at and self.transit_date and self.transit_date < self.created_at:
            raise ValidationError({"transit_date": ["Transit date cannot precede creation"]})
        if self.transit_date and self.delivery_date and self.delivery_date < self.transit_date:
            raise ValidationError({"delivery_date": ["Delivery date cannot precede transit date"]})

    @invariant.post
    def weight_must_be_positive(self):
        if self.weight is not None and self.weight <= 0:
            raise ValidationError({"weight": ["Weight must be greater than zero"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        tracking_code: str,
        owner_id: str,
        origin: str,
        destination: str,
        package_name: str,
        recipient_name: str,
        recipient_phone: str,
        payment_reference: str,
        package_description: str | None = None,
        weight: float | None = None,
        dimensions: str | None = None,
        package_type: str | None = None,
        delivery_speed: str | None = None,
        recipient_email: str | None = None,
    ):
        """Register a new pending shipment under an already issued tracking code."""
        now = datetime.now(UTC)
        shipment = cls(
            tracking_code=tracking_code,
            owner_id=owner_id,
            status=ShipmentStatus.PENDING.value,
            origin=origin,
            destination=destination,
            package_name=package_name,
            package_description=package_description,
            weight=weight,
            dimensions=dimensions,
            package_type=package_type or PackageType.STANDARD.value,
            delivery_speed=delivery_speed or DeliverySpeed.STANDARD.value,
            recipient_name=recipient_name,
            recipient_phone=recipient_phone,
            recipient_email=recipient_email,
            payment_reference=payment_reference,
            revision=0,
            created_at=now,
            updated_at=now,
        )
        shipment.raise_(
            ShipmentCreated(
                shipment_id=str(shipment.id),
                tracking_code=tracking_code,
                owner_id=owner_id,
                origin=origin,
                destination=destination,
                created_at=now,
            )
        )
        return shipment

    # -------------------------------------------------------------------
    # Concurrency guard
    # -------------------------------------------------------------------
    def ensure_revision(self, expected_revision: int | None) -> None:
        """Reject the change if the caller worked from an older copy."""
        if expected_revision is not None and expected_revision != self.revision:
            raise StaleShipment(str(self.id), expected_revision, self.revision)

    def _touch(self, now: datetime) -> None:
        self.updated_at = now
        self.revision = (self.revision or 0) + 1

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def change_status(self, new_status) -> None:
        """Set the status, stamping transit/delivery dates the first time only."""
        target = parse_status(new_status)
        current = ShipmentStatus(self.status)
        now = datetime.now(UTC)

        with atomic_change(self):
            self.status = target.value
            if target in _DEPARTED_STATUSES and self.transit_date is None:
                self.transit_date = now
            if target == ShipmentStatus.DELIVERED and self.delivery_date is None:
                self.delivery_date = now
            self._touch(now)

        self.raise_(
            ShipmentStatusChanged(
                shipment_id=str(self.id),
                tracking_code=self.tracking_code,
                previous_status=current.value,
                new_status=target.value,
                override=target not in _FORWARD_TRANSITIONS[current],
                revision=self.revision,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Driver assignment
    # -------------------------------------------------------------------
    def assign_driver(self, driver_id: str | None) -> None:
        """Bind a driver, or clear the assignment when ``driver_id`` is empty.

        Availability is not checked: one driver may serve several shipments.
        """
        previous = str(self.driver_id) if self.driver_id else None
        now = datetime.now(UTC)

        with atomic_change(self):
            self.driver_id = driver_id or None
            self._touch(now)

        if driver_id:
            self.raise_(
                DriverAssigned(
                    shipment_id=str(self.id),
                    driver_id=driver_id,
                    previous_driver_id=previous,
                    assigned_at=now,
                )
            )
        elif previous:
            self.raise_(
                DriverUnassigned(
                    shipment_id=str(self.id),
                    previous_driver_id=previous,
                    unassigned_at=now,
                )
            )

    # -------------------------------------------------------------------
    # Recipient details
    # -------------------------------------------------------------------
    def update_recipient(self, name=_UNSET, phone=_UNSET, email=_UNSET) -> None:
        """Merge recipient contact changes. Package details have no update path."""
        now = datetime.now(UTC)
        with atomic_change(self):
            if name is not _UNSET and name is not None:
                self.recipient_name = name
            if phone is not _UNSET and phone is not None:
                self.recipient_phone = phone
            if email is not _UNSET:
                self.recipient_email = email or None
            self._touch(now)

        self.raise_(
            RecipientDetailsUpdated(
                shipment_id=str(self.id),
                recipient_name=self.recipient_name,
                recipient_phone=self.recipient_phone,
                recipient_email=self.recipient_email,
                updated_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def is_owned_by(self, user_id: str) -> bool:
        return str(self.owner_id) == str(user_id)
