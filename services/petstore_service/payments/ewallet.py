"""E-wallet payments dispatch on the wallet provider."""

from services.petstore_service.exceptions import InvalidPayment, UnsupportedPayment
from services.petstore_service.models import Payment, PaymentType, WalletType
from services.petstore_service.payments.base import PaymentStrategy, is_blank
from services.petstore_service.schemas import PaymentRequest


class WalletStrategy(PaymentStrategy):
    payment_type = PaymentType.E_WALLET
    wallet_type: WalletType

    def validate(self, request: PaymentRequest) -> None:
        if is_blank(request.wallet_id):
            raise InvalidPayment(
                f"Wallet ID is required for {self.wallet_type.value} payments"
            )

    def process(self, payment: Payment, request: PaymentRequest) -> None:
        payment.payment_note = f"{self.wallet_type.value} - {request.wallet_id.strip()}"


class GrabPayStrategy(WalletStrategy):
    wallet_type = WalletType.GRABPAY


class BoostPayStrategy(WalletStrategy):
    wallet_type = WalletType.BOOSTPAY


class TouchNGoStrategy(WalletStrategy):
    wallet_type = WalletType.TOUCHNGO


class EWalletStrategyFactory:
    def __init__(self, strategies: list[WalletStrategy] | None = None):
        if strategies is None:
            strategies = [GrabPayStrategy(), BoostPayStrategy(), TouchNGoStrategy()]
        self._strategies = {s.wallet_type: s for s in strategies}

    def get(self, wallet_type: str) -> WalletStrategy:
        try:
            key = WalletType(str(wallet_type).strip().upper())
            return self._strategies[key]
        except (ValueError, KeyError):
            raise UnsupportedPayment(f"Unsupported e-wallet type: {wallet_type}")


class EWalletPaymentStrategy(PaymentStrategy):
    """Validates the wallet type, then delegates to the provider strategy."""

    payment_type = PaymentType.E_WALLET

    def __init__(self, wallet_factory: EWalletStrategyFactory | None = None):
        self._wallets = wallet_factory or EWalletStrategyFactory()

    def validate(self, request: PaymentRequest) -> None:
        if is_blank(request.wallet_type):
            raise InvalidPayment("Wallet type is required for e-wallet payments")
        self._wallets.get(request.wallet_type).validate(request)

    def process(self, payment: Payment, request: PaymentRequest) -> None:
        self._wallets.get(request.wallet_type).process(payment, request)
