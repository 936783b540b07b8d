"""The caller's address book."""

import uuid

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import require_customer
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.petstore_service.schemas import (
    AddressCreate,
    AddressResponse,
    AddressUpdate,
)
from services.petstore_service.services import address_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/users/me/addresses", tags=["addresses"])


@router.get("", response_model=list[AddressResponse])
async def list_addresses(
    current_user: AuthUser = Depends(require_customer),
    db: AsyncSession = Depends(get_async_db),
):
    return await address_service.list_addresses(db, current_user.user_id)


@router.post("", response_model=AddressResponse, status_code=status.HTTP_201_CREATED)
async def create_address(
    payload: AddressCreate,
    current_user: AuthUser = Depends(require_customer),
    db: AsyncSession = Depends(get_async_db),
):
    return await address_service.create_address(
        db, user_id=current_user.user_id, data=payload
    )


@router.get("/{address_id}", response_model=AddressResponse)
async def get_address(
    address_id: uuid.UUID,
    current_user: AuthUser = Depends(require_customer),
    db: AsyncSession = Depends(get_async_db),
):
    return await address_service.get_address(
        db, address_id=address_id, user_id=current_user.user_id
    )


@router.put("/{address_id}", response_model=AddressResponse)
async def update_address(
    address_id: uuid.UUID,
    payload: AddressUpdate,
    current_user: AuthUser = Depends(require_customer),
    db: AsyncSession = Depends(get_async_db),
):
    return await address_service.update_address(
        db, address_id=address_id, user_id=current_user.user_id, data=payload
    )


@router.delete("/{address_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_address(
    address_id: uuid.UUID,
    current_user: AuthUser = Depends(require_customer),
    db: AsyncSession = Depends(get_async_db),
):
    await address_service.delete_address(
        db, address_id=address_id, user_id=current_user.user_id
    )
