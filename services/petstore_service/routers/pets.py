"""Pet catalog router."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import require_admin, require_customer, require_member
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.petstore_service.models import PetStatus
from services.petstore_service.schemas import (
    PetCreate,
    PetPage,
    PetResponse,
    PetStatusUpdate,
    PetUpdate,
)
from services.petstore_service.services import pet_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/pets", tags=["pets"])


# ============================================================================
# PUBLIC ENDPOINTS
# ============================================================================


@router.get("", response_model=PetPage)
async def search_pets(
    name: Optional[str] = Query(None, description="Name contains (case-insensitive)"),
    category_id: Optional[uuid.UUID] = None,
    pet_status: Optional[PetStatus] = Query(None, alias="status"),
    owner_id: Optional[uuid.UUID] = None,
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_async_db),
):
    pets, total, total_pages = await pet_service.search_pets(
        db,
        name=name,
        category_id=category_id,
        status=pet_status,
        owner_id=owner_id,
        page=page,
        size=size,
    )
    return PetPage(
        pets=[PetResponse.model_validate(pet) for pet in pets],
        page=page,
        size=size,
        total_elements=total,
        total_pages=total_pages,
    )


@router.get("/latest", response_model=list[PetResponse])
async def latest_pets(
    limit: int = Query(pet_service.LATEST_PETS_LIMIT, ge=1, le=50),
    db: AsyncSession = Depends(get_async_db),
):
    return await pet_service.latest_pets(db, limit=limit)


@router.get("/find-by-status", response_model=list[PetResponse])
async def find_pets_by_status(
    statuses: list[PetStatus] = Query(..., alias="status"),
    db: AsyncSession = Depends(get_async_db),
):
    return await pet_service.find_by_status(db, statuses)


@router.get("/my-pets", response_model=list[PetResponse])
async def my_pets(
    current_user: AuthUser = Depends(require_member),
    db: AsyncSession = Depends(get_async_db),
):
    """Pets the caller bought or listed."""
    return await pet_service.my_pets(db, current_user.user_id)


@router.get("/{pet_id}", response_model=PetResponse)
async def get_pet(pet_id: uuid.UUID, db: AsyncSession = Depends(get_async_db)):
    return await pet_service.get_pet(db, pet_id)


# ============================================================================
# AUTHENTICATED ENDPOINTS
# ============================================================================


@router.post("", response_model=PetResponse, status_code=status.HTTP_201_CREATED)
async def create_pet(
    payload: PetCreate,
    current_user: AuthUser = Depends(require_member),
    db: AsyncSession = Depends(get_async_db),
):
    return await pet_service.create_pet(
        db, data=payload, created_by=current_user.user_id
    )


@router.put("/{pet_id}", response_model=PetResponse)
async def update_pet(
    pet_id: uuid.UUID,
    payload: PetUpdate,
    current_user: AuthUser = Depends(require_member),
    db: AsyncSession = Depends(get_async_db),
):
    return await pet_service.update_pet(
        db, pet_id=pet_id, data=payload, actor=current_user
    )


@router.delete("/{pet_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pet(
    pet_id: uuid.UUID,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await pet_service.delete_pet(db, pet_id)


@router.post("/{pet_id}/status", response_model=PetResponse)
async def update_pet_status(
    pet_id: uuid.UUID,
    payload: PetStatusUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await pet_service.update_pet_status(
        db, pet_id=pet_id, status=payload.status, performed_by=current_user.user_id
    )


@router.post("/{pet_id}/purchase", response_model=PetResponse)
async def purchase_pet(
    pet_id: uuid.UUID,
    current_user: AuthUser = Depends(require_customer),
    db: AsyncSession = Depends(get_async_db),
):
    return await pet_service.purchase_pet(
        db, pet_id=pet_id, buyer_id=current_user.user_id
    )
