"""Enum definitions for pet store models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class Role(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class PetStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    PENDING = "PENDING"
    SOLD = "SOLD"


class OrderStatus(str, enum.Enum):
    PLACED = "PLACED"
    APPROVED = "APPROVED"
    CANCELLED = "CANCELLED"
    DELIVERED = "DELIVERED"


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class PaymentType(str, enum.Enum):
    CREDIT_CARD = "CREDIT_CARD"
    DEBIT_CARD = "DEBIT_CARD"
    PAYPAL = "PAYPAL"
    E_WALLET = "E_WALLET"


class WalletType(str, enum.Enum):
    GRABPAY = "GRABPAY"
    BOOSTPAY = "BOOSTPAY"
    TOUCHNGO = "TOUCHNGO"


class DeliveryStatus(str, enum.Enum):
    PENDING = "PENDING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"


class AuditEntityType(str, enum.Enum):
    ORDER = "ORDER"
    PET = "PET"
    DELIVERY = "DELIVERY"


class AuditAction(str, enum.Enum):
    CREATE_ORDER = "CREATE_ORDER"
    CHECKOUT_ORDER = "CHECKOUT_ORDER"
    CANCEL_ORDER = "CANCEL_ORDER"
    CHANGE_PET_STATUS = "CHANGE_PET_STATUS"
    PURCHASE_PET = "PURCHASE_PET"
    UPDATE_DELIVERY_STATUS = "UPDATE_DELIVERY_STATUS"
