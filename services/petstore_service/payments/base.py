"""Payment strategy interface."""

from abc import ABC, abstractmethod

from services.petstore_service.models import Payment, PaymentType
from services.petstore_service.schemas import PaymentRequest


class PaymentStrategy(ABC):
    """
    Handles validation and processing for one payment type.

    ``validate`` runs before anything is written; ``process`` stamps the
    payment row once the order has been accepted for payment.
    """

    payment_type: PaymentType

    @abstractmethod
    def validate(self, request: PaymentRequest) -> None:
        """Raise ``InvalidPayment`` when required fields are missing."""

    @abstractmethod
    def process(self, payment: Payment, request: PaymentRequest) -> None:
        """Fill in type-specific payment details."""


def is_blank(value) -> bool:
    return value is None or not str(value).strip()
