"""Shipping domain exceptions.

Input errors reuse Protean's ``ValidationError`` (a ``messages`` dict keyed by
field) so they surface as HTTP 400 through Protean's FastAPI handlers. Missing
records surface as Protean's ``ObjectNotFoundError``.
"""

from protean.exceptions import ValidationError


class PermissionDenied(Exception):
    """The caller's role or ownership does not allow the operation.

    ``redirect_to`` tells the presentation layer where to send the caller.
    """

    def __init__(self, message: str, redirect_to: str = "/dashboard") -> None:
        super().__init__(message)
        self.message = message
        self.redirect_to = redirect_to


class InvalidStatus(ValidationError):
    """A shipment status outside ``pending | in_transit | delivered``."""


class PaymentNotConfirmed(ValidationError):
    """Shipment creation attempted without a confirmed payment."""


class IssuanceExhausted(Exception):
    """No unique tracking code found within the retry budget.

    Transient: the whole create operation is safe to retry.
    """


class StaleShipment(Exception):
    """The shipment changed since the caller last read it."""

    def __init__(self, shipment_id: str, expected_revision: int, actual_revision: int) -> None:
        super().__init__(
            f"Shipment {shipment_id} is at revision {actual_revision}, expected {expected_revision}"
        )
        self.shipment_id = shipment_id
        self.expected_revision = expected_revision
        self.actual_revision = actual_revision


class GeocodeUnavailable(Exception):
    """The destination could not be resolved to coordinates (failure or timeout)."""


class StoreUnavailable(Exception):
    """Transient failure talking to the document store."""
