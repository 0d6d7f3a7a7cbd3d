"""Shipment domain events: immutable facts about shipment state changes."""

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from shipping.domain import shipping


@shipping.event(part_of="Shipment")
class ShipmentCreated:
    """A paid shipment was registered and issued a tracking code."""

    __version__ = 1

    shipment_id = Identifier(required=True)
    tracking_code = String(required=True)
    owner_id = Identifier(required=True)
    origin = String(required=True)
    destination = String(required=True)
    created_at = DateTime(required=True)


@shipping.event(part_of="Shipment")
class ShipmentStatusChanged:
    """An administrator set the shipment's status.

    ``override`` is True when the move was not a forward workflow step
    (a jump, a backward move, or re-entering the same status).
    """

    __version__ = 1

    shipment_id = Identifier(required=True)
    tracking_code = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    override = Boolean(default=False)
    revision = Integer(required=True)
    changed_at = DateTime(required=True)


@shipping.event(part_of="Shipment")
class DriverAssigned:
    """A driver was bound to the shipment."""

    __version__ = 1

    shipment_id = Identifier(required=True)
    driver_id = Identifier(required=True)
    previous_driver_id = Identifier()
    assigned_at = DateTime(required=True)


@shipping.event(part_of="Shipment")
class DriverUnassigned:
    """The shipment's driver assignment was cleared."""

    __version__ = 1

    shipment_id = Identifier(required=True)
    previous_driver_id = Identifier(required=True)
    unassigned_at = DateTime(required=True)


@shipping.event(part_of="Shipment")
class RecipientDetailsUpdated:
    """The recipient contact details on a shipment changed."""

    __version__ = 1

    shipment_id = Identifier(required=True)
    recipient_name = String(required=True)
    recipient_phone = String(required=True)
    recipient_email = String()
    updated_at = DateTime(required=True)
