from typing import Iterable, Optional

from libs.common.logging import get_logger
from services.petstore_service.exceptions import UnsupportedPaymentType
from services.petstore_service.models import PaymentType
from services.petstore_service.payments.base import PaymentStrategy
from services.petstore_service.payments.cards import (
    CreditCardPaymentStrategy,
    DebitCardPaymentStrategy,
)
from services.petstore_service.payments.ewallet import EWalletPaymentStrategy
from services.petstore_service.payments.paypal import PayPalPaymentStrategy

logger = get_logger(__name__)


def default_strategies() -> list[PaymentStrategy]:
    return [
        CreditCardPaymentStrategy(),
        DebitCardPaymentStrategy(),
        PayPalPaymentStrategy(),
        EWalletPaymentStrategy(),
    ]


class PaymentStrategyFactory:
    """Looks up the strategy registered for a payment type."""

    def __init__(self, strategies: Optional[Iterable[PaymentStrategy]] = None):
        if strategies is None:
            strategies = default_strategies()
        self._strategies = {s.payment_type: s for s in strategies}

    def get(self, payment_type) -> PaymentStrategy:
        try:
            key = PaymentType(str(getattr(payment_type, "value", payment_type)).strip().upper())
            return self._strategies[key]
        except (ValueError, KeyError):
            logger.warning("Rejected payment with unsupported type %r", payment_type)
            raise UnsupportedPaymentType(f"Unsupported payment type: {payment_type}")

    @property
    def supported_types(self) -> list[PaymentType]:
        return list(self._strategies)
