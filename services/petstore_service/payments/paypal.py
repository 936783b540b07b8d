from services.petstore_service.exceptions import InvalidPayment
from services.petstore_service.models import Payment, PaymentType
from services.petstore_service.payments.base import PaymentStrategy, is_blank
from services.petstore_service.schemas import PaymentRequest


class PayPalPaymentStrategy(PaymentStrategy):
    payment_type = PaymentType.PAYPAL

    def validate(self, request: PaymentRequest) -> None:
        if is_blank(request.paypal_id):
            raise InvalidPayment("PayPal ID is required for PayPal payments")

    def process(self, payment: Payment, request: PaymentRequest) -> None:
        payment.payment_note = f"PayPal ID: {request.paypal_id.strip()}"
