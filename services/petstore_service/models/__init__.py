"""Pet store models package."""

from services.petstore_service.models.accounts import Address, User
from services.petstore_service.models.catalog import Category, Pet
from services.petstore_service.models.commerce import (
    AuditLog,
    Cart,
    CartItem,
    Delivery,
    Discount,
    Order,
    OrderItem,
    Payment,
)
from services.petstore_service.models.enums import (
    AuditAction,
    AuditEntityType,
    DeliveryStatus,
    OrderStatus,
    PaymentStatus,
    PaymentType,
    PetStatus,
    Role,
    WalletType,
)

__all__ = [
    "Address",
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "Cart",
    "CartItem",
    "Category",
    "Delivery",
    "DeliveryStatus",
    "Discount",
    "Order",
    "OrderItem",
    "OrderStatus",
    "Payment",
    "PaymentStatus",
    "PaymentType",
    "Pet",
    "PetStatus",
    "Role",
    "User",
    "WalletType",
]
