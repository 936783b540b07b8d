from services.petstore_service.payments.base import PaymentStrategy
from services.petstore_service.payments.ewallet import EWalletStrategyFactory
from services.petstore_service.payments.factory import PaymentStrategyFactory

__all__ = ["EWalletStrategyFactory", "PaymentStrategy", "PaymentStrategyFactory"]
