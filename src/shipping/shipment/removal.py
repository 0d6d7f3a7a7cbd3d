"""Shipment deletion: command and handler (admin only)."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from shipping.access.gate import Operation, authorize
from shipping.domain import shipping
from shipping.shipment.shipment import Shipment

logger = structlog.get_logger(__name__)


@shipping.command(part_of="Shipment")
class DeleteShipment:
    shipment_id = Identifier(required=True)
    caller_id = Identifier(required=True)


@shipping.command_handler(part_of=Shipment)
class DeleteShipmentHandler:
    @handle(DeleteShipment)
    def delete_shipment(self, command):
        authorize(command.caller_id, Operation.DELETE_SHIPMENT)
        repo = current_domain.repository_for(Shipment)
        shipment = repo.load(command.shipment_id)
        repo.delete(shipment)
        logger.info(
            "Shipment deleted",
            shipment_id=command.shipment_id,
            tracking_code=shipment.tracking_code,
            caller_id=command.caller_id,
        )
