"""Public registration and login."""

from fastapi import APIRouter, Depends, Request, status
from libs.common.rate_limit import auth_limit
from libs.db.session import get_async_db
from services.petstore_service.schemas import LoginRequest, TokenResponse, UserRegister
from services.petstore_service.services import user_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED
)
@auth_limit
async def register(
    request: Request,
    payload: UserRegister,
    db: AsyncSession = Depends(get_async_db),
):
    """Create a customer account and return an access token."""
    user = await user_service.register_user(db, data=payload)
    return user_service.issue_token(user)


@router.post("/login", response_model=TokenResponse)
@auth_limit
async def login(
    request: Request,
    payload: LoginRequest,
    db: AsyncSession = Depends(get_async_db),
):
    user = await user_service.authenticate(
        db, email=payload.email, password=payload.password
    )
    return user_service.issue_token(user)
