"""Payment confirmation port (abstract interface).

Shipment creation is gated on a confirmed payment. The checkout itself lives
outside this system; all the shipping domain needs is a yes/no answer for a
payment reference.
"""

from abc import ABC, abstractmethod


class PaymentConfirmation(ABC):
    """Abstract payment confirmation interface."""

    @abstractmethod
    def is_confirmed(self, payment_reference: str) -> bool:
        """Return True if the payment behind ``payment_reference`` settled."""
        ...
