"""Payment confirmation factory.

Provides get_payments() / set_payments() to swap implementations. Only the
fake adapter ships today; ``PAYMENT_ADAPTER`` selects it.
"""

from shipping import settings
from shipping.payment.fake_adapter import FakePaymentConfirmation
from shipping.payment.port import PaymentConfirmation

_current_payments: PaymentConfirmation | None = None


def _build_default() -> PaymentConfirmation:
    if settings.PAYMENT_ADAPTER != "fake":
        raise ValueError(f"Unknown payment adapter '{settings.PAYMENT_ADAPTER}'")
    return FakePaymentConfirmation()


def get_payments() -> PaymentConfirmation:
    """Return the active payment confirmation adapter."""
    global _current_payments
    if _current_payments is None:
        _current_payments = _build_default()
    return _current_payments


def set_payments(payments: PaymentConfirmation) -> None:
    """Override the active adapter (useful for tests)."""
    global _current_payments
    _current_payments = payments


def reset_payments() -> None:
    global _current_payments
    _current_payments = None
