"""Discount CRUD (admin), active listing and code validation."""

import uuid
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import require_admin, require_member
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.petstore_service.schemas import (
    DiscountCreate,
    DiscountPreview,
    DiscountResponse,
    DiscountUpdate,
)
from services.petstore_service.services import discount_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/discounts", tags=["discounts"])


@router.get("/active", response_model=list[DiscountResponse])
async def list_active_discounts(
    _user: AuthUser = Depends(require_member),
    db: AsyncSession = Depends(get_async_db),
):
    return await discount_service.list_active_discounts(db)


@router.get("/validate", response_model=DiscountPreview)
async def validate_discount(
    code: str = Query(..., min_length=1, max_length=20),
    total: Decimal = Query(Decimal("0.00"), ge=0),
    _user: AuthUser = Depends(require_member),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Check a code and preview its effect on ``total``.
    Invalid or expired codes return 400.
    """
    return await discount_service.preview_discount(db, code=code, total=total)


@router.get("", response_model=list[DiscountResponse])
async def list_discounts(
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await discount_service.list_discounts(db)


@router.get("/{discount_id}", response_model=DiscountResponse)
async def get_discount(
    discount_id: uuid.UUID,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await discount_service.get_discount(db, discount_id)


@router.post(
    "", response_model=DiscountResponse, status_code=status.HTTP_201_CREATED
)
async def create_discount(
    payload: DiscountCreate,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await discount_service.create_discount(db, data=payload)


@router.put("/{discount_id}", response_model=DiscountResponse)
async def update_discount(
    discount_id: uuid.UUID,
    payload: DiscountUpdate,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await discount_service.update_discount(
        db, discount_id=discount_id, data=payload
    )


@router.delete("/{discount_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_discount(
    discount_id: uuid.UUID,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await discount_service.delete_discount(db, discount_id)
