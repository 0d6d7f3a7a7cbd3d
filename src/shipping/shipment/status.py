"""Shipment status updates: command and handler (admin only)."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from shipping.access.gate import Operation, authorize
from shipping.domain import shipping
from shipping.shipment.shipment import Shipment

logger = structlog.get_logger(__name__)


@shipping.command(part_of="Shipment")
class UpdateShipmentStatus:
    """Set a shipment's status. Any of the three states may be chosen."""

    shipment_id = Identifier(required=True)
    caller_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    expected_revision = Integer()


@shipping.command_handler(part_of=Shipment)
class ShipmentStatusHandler:
    @handle(UpdateShipmentStatus)
    def update_status(self, command):
        authorize(command.caller_id, Operation.UPDATE_STATUS)
        repo = current_domain.repository_for(Shipment)
        shipment = repo.load(command.shipment_id)

        shipment.ensure_revision(command.expected_revision)
        previous = shipment.status
        shipment.change_status(command.status)
        repo.add(shipment)

        logger.info(
            "Shipment status changed",
            shipment_id=command.shipment_id,
            previous_status=previous,
            new_status=shipment.status,
            caller_id=command.caller_id,
        )
        return shipment.revision
