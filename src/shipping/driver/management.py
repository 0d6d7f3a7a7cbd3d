"""Driver roster management: commands and handler (admin only)."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from shipping.access.gate import Operation, authorize
from shipping.domain import shipping
from shipping.driver.driver import EDITABLE_FIELDS, Driver
from shipping.shipment.shipment import Shipment

logger = structlog.get_logger(__name__)


@shipping.command(part_of="Driver")
class RegisterDriver:
    """Add a driver to the roster."""

    caller_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    email = String(required=True, max_length=254)
    phone = String(required=True, max_length=30)
    address = String(max_length=500)
    license_number = String(required=True, max_length=50)
    vehicle_type = String(max_length=20)
    status = String(max_length=20)


@shipping.command(part_of="Driver")
class UpdateDriver:
    """Edit a driver's details or availability. Omitted fields are left as-is."""

    caller_id = Identifier(required=True)
    driver_id = Identifier(required=True)
    name = String(max_length=200)
    email = String(max_length=254)
    phone = String(max_length=30)
    address = String(max_length=500)
    license_number = String(max_length=50)
    vehicle_type = String(max_length=20)
    status = String(max_length=20)


@shipping.command(part_of="Driver")
class RemoveDriver:
    """Delete a driver. Shipments that reference it keep the dangling id."""

    caller_id = Identifier(required=True)
    driver_id = Identifier(required=True)


@shipping.command_handler(part_of=Driver)
class DriverManagementHandler:
    @handle(RegisterDriver)
    def register_driver(self, command):
        authorize(command.caller_id, Operation.MANAGE_DRIVERS)
        driver = Driver.register(
            name=command.name,
            email=command.email,
            phone=command.phone,
            address=command.address,
            license_number=command.license_number,
            vehicle_type=command.vehicle_type,
            status=command.status,
        )
        current_domain.repository_for(Driver).add(driver)
        logger.info("Driver registered", driver_id=str(driver.id), caller_id=command.caller_id)
        return str(driver.id)

    @handle(UpdateDriver)
    def update_driver(self, command):
        authorize(command.caller_id, Operation.MANAGE_DRIVERS)
        repo = current_domain.repository_for(Driver)
        driver = repo.load(command.driver_id)

        changes = {
            field: getattr(command, field) for field in EDITABLE_FIELDS if getattr(command, field) is not None
        }
        driver.update_details(**changes)
        repo.add(driver)

    @handle(RemoveDriver)
    def remove_driver(self, command):
        authorize(command.caller_id, Operation.MANAGE_DRIVERS)
        repo = current_domain.repository_for(Driver)
        driver = repo.load(command.driver_id)

        # No cascade: referencing shipments render "Unknown Driver" from now on
        dangling = current_domain.repository_for(Shipment).referencing_driver(str(driver.id))
        repo.delete(driver)
        logger.info(
            "Driver removed",
            driver_id=str(driver.id),
            caller_id=command.caller_id,
            dangling_references=len(dangling),
        )
