"""Configurable fake payment confirmation for development and testing.

Confirms every non-blank reference unless configured otherwise through
``/dev/payments/configure`` or directly in tests.
"""

from shipping.payment.port import PaymentConfirmation


class FakePaymentConfirmation(PaymentConfirmation):
    def __init__(self) -> None:
        self.should_confirm: bool = True
        self.declined_references: set[str] = set()
        self.calls: list[dict] = []

    def configure(self, should_confirm: bool, declined_references: list[str] | None = None) -> None:
        self.should_confirm = should_confirm
        self.declined_references = set(declined_references or [])

    def is_confirmed(self, payment_reference: str) -> bool:
        self.calls.append({"method": "is_confirmed", "payment_reference": payment_reference})
        if not payment_reference or payment_reference in self.declined_references:
            return False
        return self.should_confirm
