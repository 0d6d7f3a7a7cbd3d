"""Driver assignment: command and handler (admin only).

An empty driver id, or the literal ``"none"`` sent by the admin selector,
clears the assignment. A driver may be assigned to several active shipments.
"""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from shipping.access.gate import Operation, authorize
from shipping.domain import shipping
from shipping.driver.driver import Driver
from shipping.shipment.shipment import Shipment

UNASSIGN_SENTINEL = "none"


def normalize_driver_id(driver_id: str | None) -> str | None:
    if driver_id is None:
        return None
    driver_id = driver_id.strip()
    if not driver_id or driver_id.lower() == UNASSIGN_SENTINEL:
        return None
    return driver_id


@shipping.command(part_of="Shipment")
class AssignDriver:
    shipment_id = Identifier(required=True)
    caller_id = Identifier(required=True)
    driver_id = String(max_length=255)
    expected_revision = Integer()


@shipping.command_handler(part_of=Shipment)
class AssignDriverHandler:
    @handle(AssignDriver)
    def assign_driver(self, command):
        authorize(command.caller_id, Operation.ASSIGN_DRIVER)
        repo = current_domain.repository_for(Shipment)
        shipment = repo.load(command.shipment_id)
        shipment.ensure_revision(command.expected_revision)

        driver_id = normalize_driver_id(command.driver_id)
        if driver_id is not None:
            # Raises ObjectNotFoundError for unknown drivers
            driver_id = str(current_domain.repository_for(Driver).load(driver_id).id)

        shipment.assign_driver(driver_id)
        repo.add(shipment)
        return shipment.revision
