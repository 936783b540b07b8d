from services.petstore_service.exceptions import InvalidPayment
from services.petstore_service.models import Payment, PaymentType
from services.petstore_service.payments.base import PaymentStrategy, is_blank
from services.petstore_service.schemas import PaymentRequest


def mask_card_number(card_number: str) -> str:
    """Keep the last four digits: ``**** **** **** 1234``."""
    digits = "".join(ch for ch in card_number if ch.isdigit())
    return f"**** **** **** {digits[-4:]}"


class CardPaymentStrategy(PaymentStrategy):
    label = "Card"

    def validate(self, request: PaymentRequest) -> None:
        if is_blank(request.card_number):
            raise InvalidPayment(
                f"Card number is required for {self.label.lower()} payments"
            )

    def process(self, payment: Payment, request: PaymentRequest) -> None:
        payment.payment_note = mask_card_number(request.card_number)


class CreditCardPaymentStrategy(CardPaymentStrategy):
    payment_type = PaymentType.CREDIT_CARD
    label = "Credit card"


class DebitCardPaymentStrategy(CardPaymentStrategy):
    payment_type = PaymentType.DEBIT_CARD
    label = "Debit card"
