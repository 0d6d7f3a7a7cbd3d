"""Recipient detail edits: command and handler (owner or admin)."""

from protean import handle
from protean.fields import Boolean, Identifier, Integer, String
from protean.utils.globals import current_domain

from shipping.access.gate import Operation, authorize
from shipping.domain import shipping
from shipping.shipment.shipment import Shipment


@shipping.command(part_of="Shipment")
class UpdateRecipientDetails:
    """Edit the recipient's contact details. Omitted fields are left as-is;
    ``clear_recipient_email`` removes the stored email."""

    shipment_id = Identifier(required=True)
    caller_id = Identifier(required=True)
    recipient_name = String(max_length=200)
    recipient_phone = String(max_length=30)
    recipient_email = String(max_length=254)
    clear_recipient_email = Boolean(default=False)
    expected_revision = Integer()


@shipping.command_handler(part_of=Shipment)
class RecipientDetailsHandler:
    @handle(UpdateRecipientDetails)
    def update_recipient_details(self, command):
        repo = current_domain.repository_for(Shipment)
        shipment = repo.load(command.shipment_id)
        authorize(command.caller_id, Operation.UPDATE_SHIPMENT, shipment)
        shipment.ensure_revision(command.expected_revision)

        changes = {}
        if command.recipient_name is not None:
            changes["name"] = command.recipient_name
        if command.recipient_phone is not None:
            changes["phone"] = command.recipient_phone
        if command.clear_recipient_email:
            changes["email"] = None
        elif command.recipient_email is not None:
            changes["email"] = command.recipient_email
        shipment.update_recipient(**changes)
        repo.add(shipment)
        return shipment.revision
