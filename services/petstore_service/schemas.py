"""Pydantic schemas for the pet store service."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import ensure_utc
from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)
from services.petstore_service.models import (
    AuditAction,
    AuditEntityType,
    DeliveryStatus,
    OrderStatus,
    PaymentStatus,
    PaymentType,
    PetStatus,
    Role,
)

# ============================================================================
# AUTH & USER SCHEMAS
# ============================================================================


class UserRegister(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    roles: list[Role]
    created_at: datetime
    updated_at: datetime


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int  # seconds
    user: UserResponse


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6, max_length=128)
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    roles: Optional[list[Role]] = None  # Admin only


# ============================================================================
# ADDRESS SCHEMAS
# ============================================================================


class AddressBase(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=200)
    phone_number: str = Field(..., min_length=1, max_length=50)
    street: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    postal_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=1, max_length=100)
    is_default: bool = False


class AddressCreate(AddressBase):
    pass


class AddressUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=200)
    phone_number: Optional[str] = Field(None, min_length=1, max_length=50)
    street: Optional[str] = Field(None, min_length=1, max_length=255)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, min_length=1, max_length=20)
    country: Optional[str] = Field(None, min_length=1, max_length=100)
    is_default: Optional[bool] = None

    @field_validator(
        "full_name",
        "phone_number",
        "street",
        "city",
        "postal_code",
        "country",
        "is_default",
    )
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value


class AddressResponse(AddressBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    created_at: datetime
    updated_at: datetime


# ============================================================================
# CATALOG SCHEMAS
# ============================================================================


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class CategoryUpdate(CategoryCreate):
    pass


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str


class PetBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    category_id: uuid.UUID
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    photo_urls: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class PetCreate(PetBase):
    pass


class PetUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category_id: Optional[uuid.UUID] = None
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    photo_urls: Optional[list[str]] = None
    tags: Optional[list[str]] = None

    # Omit a field to leave it unchanged; only description may be cleared
    @field_validator("name", "category_id", "price", "photo_urls", "tags")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value


class PetStatusUpdate(BaseModel):
    status: PetStatus


class PetResponse(PetBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    category: CategoryResponse
    status: PetStatus
    owner_id: Optional[uuid.UUID] = None
    created_by: Optional[uuid.UUID] = None
    last_modified_by: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime


class PetSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    status: PetStatus


class PetPage(BaseModel):
    pets: list[PetResponse]
    page: int
    size: int
    total_elements: int
    total_pages: int


# ============================================================================
# DISCOUNT SCHEMAS
# ============================================================================


class DiscountBase(BaseModel):
    code: str = Field(..., min_length=1, max_length=20)
    percentage: Decimal = Field(..., gt=0, le=100, decimal_places=2)
    valid_from: datetime
    valid_to: datetime
    description: Optional[str] = None
    active: bool = True


class DiscountCreate(DiscountBase):
    @model_validator(mode="after")
    def check_window(self):
        if self.valid_to <= self.valid_from:
            raise ValueError("valid_to must be after valid_from")
        return self


class DiscountUpdate(BaseModel):
    code: Optional[str] = Field(None, min_length=1, max_length=20)
    percentage: Optional[Decimal] = Field(None, gt=0, le=100, decimal_places=2)
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    description: Optional[str] = None
    active: Optional[bool] = None


class DiscountResponse(DiscountBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class DiscountPreview(BaseModel):
    code: str
    percentage: Decimal
    original_total: Decimal
    discount_amount: Decimal
    new_total: Decimal


# ============================================================================
# CART SCHEMAS
# ============================================================================


class CartItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    pet_id: uuid.UUID
    price: Decimal
    pet: PetSummary
    created_at: datetime


class CartResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    items: list[CartItemResponse] = []
    total: Decimal


# ============================================================================
# ORDER SCHEMAS
# ============================================================================


class CheckoutRequest(BaseModel):
    discount_code: Optional[str] = Field(None, max_length=20)


class PaymentRequest(BaseModel):
    shipping_address_id: uuid.UUID
    billing_address_id: Optional[uuid.UUID] = None
    payment_type: str = Field(..., min_length=1)
    card_number: Optional[str] = None
    paypal_id: Optional[str] = None
    wallet_type: Optional[str] = None
    wallet_id: Optional[str] = None
    payment_note: Optional[str] = Field(None, max_length=255)


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    amount: Decimal
    status: PaymentStatus
    payment_type: PaymentType
    payment_note: Optional[str] = None
    paid_at: Optional[datetime] = None


class DeliveryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    phone: str
    address: str
    status: DeliveryStatus
    created_at: datetime
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None


class DeliveryStatusUpdate(BaseModel):
    status: DeliveryStatus
    at: Optional[datetime] = None  # Defaults to now

    @field_validator("at")
    @classmethod
    def normalize_at(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    pet_id: uuid.UUID
    price: Decimal
    pet: PetSummary


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    order_number: str
    user_id: uuid.UUID
    status: OrderStatus
    total_amount: Decimal
    discount_code: Optional[str] = None
    discount_percentage: Optional[Decimal] = None
    discount_amount: Optional[Decimal] = None
    shipping_address_id: Optional[uuid.UUID] = None
    billing_address_id: Optional[uuid.UUID] = None
    items: list[OrderItemResponse] = []
    payment: Optional[PaymentResponse] = None
    delivery: Optional[DeliveryResponse] = None
    created_at: datetime
    updated_at: datetime


# ============================================================================
# AUDIT SCHEMAS
# ============================================================================


class AuditLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    entity_type: AuditEntityType
    entity_id: uuid.UUID
    action: AuditAction
    performed_by: Optional[uuid.UUID] = None
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    created_at: datetime
