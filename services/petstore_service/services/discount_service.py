"""Discount codes: admin CRUD, validation and price calculation."""

import uuid
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from libs.common.datetime_utils import ensure_utc, utc_now
from libs.common.logging import get_logger
from services.petstore_service.exceptions import (
    DiscountAlreadyExists,
    DiscountInUse,
    DiscountNotFound,
    InvalidDiscount,
)
from services.petstore_service.models import Discount, Order
from services.petstore_service.schemas import (
    DiscountCreate,
    DiscountPreview,
    DiscountUpdate,
)
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

CENTS = Decimal("0.01")


def quantize(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)


def normalize_code(code: str) -> str:
    return code.strip().upper()


def calculate_discount(total: Decimal, percentage: Decimal) -> Decimal:
    """``total * percentage / 100`` rounded half-up to cents."""
    return quantize(Decimal(total) * Decimal(percentage) / Decimal(100))


def is_currently_valid(discount: Discount, now=None) -> bool:
    now = now or utc_now()
    return (
        discount.active
        and ensure_utc(discount.valid_from) <= now <= ensure_utc(discount.valid_to)
    )


async def list_discounts(db: AsyncSession) -> list[Discount]:
    result = await db.execute(select(Discount).order_by(Discount.created_at.desc()))
    return list(result.scalars().all())


async def get_discount(db: AsyncSession, discount_id: uuid.UUID) -> Discount:
    discount = await db.get(Discount, discount_id)
    if discount is None:
        raise DiscountNotFound(f"Discount not found with ID: {discount_id}")
    return discount


async def get_by_code(db: AsyncSession, code: str) -> Optional[Discount]:
    result = await db.execute(
        select(Discount).where(Discount.code == normalize_code(code))
    )
    return result.scalar_one_or_none()


async def create_discount(db: AsyncSession, *, data: DiscountCreate) -> Discount:
    code = normalize_code(data.code)
    if await get_by_code(db, code):
        raise DiscountAlreadyExists(f"Discount with code '{code}' already exists")

    discount = Discount(**data.model_dump(exclude={"code"}), code=code)
    db.add(discount)
    await db.commit()
    await db.refresh(discount)
    logger.info("Created discount %s (%s%%)", discount.code, discount.percentage)
    return discount


async def update_discount(
    db: AsyncSession, *, discount_id: uuid.UUID, data: DiscountUpdate
) -> Discount:
    discount = await get_discount(db, discount_id)
    update_data = data.model_dump(exclude_unset=True)

    if update_data.get("code") is not None:
        code = normalize_code(update_data["code"])
        existing = await get_by_code(db, code)
        if existing is not None and existing.id != discount.id:
            raise DiscountAlreadyExists(f"Discount with code '{code}' already exists")
        update_data["code"] = code

    for field, value in update_data.items():
        if value is None and field != "description":
            continue
        setattr(discount, field, value)

    if ensure_utc(discount.valid_to) <= ensure_utc(discount.valid_from):
        await db.rollback()
        raise InvalidDiscount("valid_to must be after valid_from")

    await db.commit()
    await db.refresh(discount)
    return discount


async def delete_discount(db: AsyncSession, discount_id: uuid.UUID) -> None:
    discount = await get_discount(db, discount_id)
    used = (
        await db.execute(
            select(func.count(Order.id)).where(Order.discount_id == discount.id)
        )
    ).scalar_one()
    if used:
        raise DiscountInUse(
            f"Discount is currently in use and cannot be deleted: {discount.id}"
        )

    await db.delete(discount)
    await db.commit()
    logger.info("Deleted discount %s", discount.code)


async def validate_discount(db: AsyncSession, code: str) -> Discount:
    """Return the discount for ``code`` if it exists, is active and in its window."""
    discount = await get_by_code(db, code) if code and code.strip() else None
    if discount is None or not is_currently_valid(discount):
        logger.warning("Rejected discount code %r", code)
        raise InvalidDiscount("Invalid or expired discount code")
    return discount


async def list_active_discounts(db: AsyncSession) -> list[Discount]:
    now = utc_now()
    discounts = await list_discounts(db)
    return [d for d in discounts if is_currently_valid(d, now)]


async def preview_discount(
    db: AsyncSession, *, code: str, total: Decimal
) -> DiscountPreview:
    discount = await validate_discount(db, code)
    amount = calculate_discount(total, discount.percentage)
    return DiscountPreview(
        code=discount.code,
        percentage=discount.percentage,
        original_total=quantize(total),
        discount_amount=amount,
        new_total=quantize(Decimal(total) - amount),
    )
