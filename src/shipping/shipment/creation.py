"""Shipment creation: command and handler.

A shipment is only accepted once its payment is confirmed. The tracking code
is issued against the repository right before insertion; the store's unique
index on ``tracking_code`` is the final word if two issuances race.
"""

import structlog
from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from shipping import settings
from shipping.access.gate import Operation, authorize
from shipping.domain import shipping
from shipping.errors import PaymentNotConfirmed
from shipping.payment import get_payments
from shipping.shipment.shipment import Shipment
from shipping.shipment.tracking_code import issue_tracking_code

logger = structlog.get_logger(__name__)


@shipping.command(part_of="Shipment")
class CreateShipment:
    """Register a new paid shipment for the caller."""

    caller_id = Identifier(required=True)
    origin = String(required=True, max_length=500)
    destination = String(required=True, max_length=500)
    package_name = String(required=True, max_length=200)
    package_description = Text()
    weight = Float()
    dimensions = String(max_length=100)
    package_type = String(max_length=20)
    delivery_speed = String(max_length=20)
    recipient_name = String(required=True, max_length=200)
    recipient_phone = String(required=True, max_length=30)
    recipient_email = String(max_length=254)
    payment_reference = String(required=True, max_length=255)


@shipping.command_handler(part_of=Shipment)
class CreateShipmentHandler:
    @handle(CreateShipment)
    def create_shipment(self, command):
        authorize(command.caller_id, Operation.CREATE_SHIPMENT)

        if not get_payments().is_confirmed(command.payment_reference):
            logger.warning(
                "Shipment rejected: payment not confirmed",
                caller_id=command.caller_id,
                payment_reference=command.payment_reference,
            )
            raise PaymentNotConfirmed({"payment_reference": ["Payment has not been confirmed"]})

        repo = current_domain.repository_for(Shipment)
        tracking_code = issue_tracking_code(
            repo.tracking_code_exists,
            max_attempts=settings.TRACKING_CODE_MAX_ATTEMPTS,
        )
        shipment = Shipment.create(
            tracking_code=tracking_code,
            owner_id=command.caller_id,
            origin=command.origin,
            destination=command.destination,
            package_name=command.package_name,
            package_description=command.package_description,
            weight=command.weight,
            dimensions=command.dimensions,
            package_type=command.package_type,
            delivery_speed=command.delivery_speed,
            recipient_name=command.recipient_name,
            recipient_phone=command.recipient_phone,
            recipient_email=command.recipient_email,
            payment_reference=command.payment_reference,
        )
        repo.add(shipment)
        logger.info(
            "Shipment created",
            shipment_id=str(shipment.id),
            tracking_code=tracking_code,
            owner_id=command.caller_id,
        )
        return str(shipment.id)
