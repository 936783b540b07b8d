"""User administration and self-service profile endpoints."""

import uuid

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import require_admin, require_member
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.petstore_service.schemas import UserResponse, UserUpdate
from services.petstore_service.services import user_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await user_service.list_users(db)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: uuid.UUID,
    current_user: AuthUser = Depends(require_member),
    db: AsyncSession = Depends(get_async_db),
):
    """Admins can read any account; users only their own."""
    return await user_service.get_user_for(db, user_id=user_id, actor=current_user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: uuid.UUID,
    payload: UserUpdate,
    current_user: AuthUser = Depends(require_member),
    db: AsyncSession = Depends(get_async_db),
):
    return await user_service.update_user(
        db, user_id=user_id, data=payload, actor=current_user
    )


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: uuid.UUID,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await user_service.delete_user(db, user_id)
