"""User accounts: registration, authentication and admin management."""

import uuid
from typing import Optional

from libs.auth.models import AuthUser
from libs.auth.security import create_access_token, hash_password, verify_password
from libs.common.config import get_settings
from libs.common.logging import get_logger
from services.petstore_service.exceptions import (
    AccessDenied,
    AuthenticationFailed,
    EmailAlreadyInUse,
    UserInUse,
    UserNotFound,
)
from services.petstore_service.models import Cart, CartItem, Order, Pet, Role, User
from services.petstore_service.schemas import (
    TokenResponse,
    UserRegister,
    UserResponse,
    UserUpdate,
)
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(
        select(User).where(func.lower(User.email) == normalize_email(email))
    )
    return result.scalar_one_or_none()


async def get_user(db: AsyncSession, user_id: uuid.UUID) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise UserNotFound(f"User not found with id: {user_id}")
    return user


async def register_user(db: AsyncSession, *, data: UserRegister) -> User:
    """Create a USER account. Roles cannot be chosen at registration."""
    if await get_user_by_email(db, data.email):
        raise EmailAlreadyInUse(f"Email '{data.email}' is already in use")

    user = User(
        email=normalize_email(data.email),
        password_hash=hash_password(data.password),
        first_name=data.first_name.strip(),
        last_name=data.last_name.strip(),
        roles=[Role.USER.value],
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info("Registered user %s (%s)", user.id, user.email)
    return user


async def authenticate(db: AsyncSession, *, email: str, password: str) -> User:
    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Failed login attempt for %s", normalize_email(email))
        raise AuthenticationFailed("Invalid email or password")
    return user


def issue_token(user: User) -> TokenResponse:
    """Sign a JWT for ``user``."""
    settings = get_settings()
    token = create_access_token(str(user.id), user.email, user.roles)
    return TokenResponse(
        access_token=token,
        expires_in=settings.JWT_EXPIRATION_MINUTES * 60,
        user=UserResponse.model_validate(user),
    )


async def list_users(db: AsyncSession) -> list[User]:
    result = await db.execute(select(User).order_by(User.created_at))
    return list(result.scalars().all())


def _check_self_or_admin(actor: AuthUser, user_id: uuid.UUID) -> None:
    if not actor.is_admin and actor.user_id != user_id:
        raise AccessDenied("You can only access your own account")


async def get_user_for(db: AsyncSession, *, user_id: uuid.UUID, actor: AuthUser) -> User:
    _check_self_or_admin(actor, user_id)
    return await get_user(db, user_id)


async def update_user(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    data: UserUpdate,
    actor: AuthUser,
) -> User:
    """Update a profile. Admins may update anyone and change roles."""
    _check_self_or_admin(actor, user_id)
    user = await get_user(db, user_id)

    if data.roles is not None and not actor.is_admin:
        raise AccessDenied("Only administrators can change roles")

    if data.email is not None:
        new_email = normalize_email(data.email)
        if new_email != user.email:
            existing = await get_user_by_email(db, new_email)
            if existing is not None and existing.id != user.id:
                raise EmailAlreadyInUse(f"Email '{data.email}' is already in use")
            user.email = new_email

    if data.password is not None:
        user.password_hash = hash_password(data.password)
    if data.first_name is not None:
        user.first_name = data.first_name.strip()
    if data.last_name is not None:
        user.last_name = data.last_name.strip()
    if data.roles is not None:
        user.roles = sorted({role.value for role in data.roles}) or [Role.USER.value]

    await db.commit()
    await db.refresh(user)
    logger.info("Updated user %s", user.id)
    return user


async def _count(db: AsyncSession, query) -> int:
    return (await db.execute(query)).scalar_one()


async def delete_user(db: AsyncSession, user_id: uuid.UUID) -> None:
    """Delete a user that owns, created and ordered nothing."""
    user = await get_user(db, user_id)

    owned = await _count(db, select(func.count(Pet.id)).where(Pet.owner_id == user_id))
    created = await _count(
        db, select(func.count(Pet.id)).where(Pet.created_by == user_id)
    )
    orders = await _count(
        db, select(func.count(Order.id)).where(Order.user_id == user_id)
    )
    if owned or created or orders:
        held = []
        if owned:
            held.append(f"ownership of {owned} pet(s)")
        if created:
            held.append(f"created {created} pet(s)")
        if orders:
            held.append(f"{orders} order(s)")
        raise UserInUse(
            f"Cannot delete user '{user.email}' (ID: {user.id}) because they have "
            f"{' and '.join(held)} that still exist in the database"
        )

    await db.execute(
        update(Pet).where(Pet.last_modified_by == user_id).values(last_modified_by=None)
    )
    cart_ids = select(Cart.id).where(Cart.user_id == user_id)
    await db.execute(delete(CartItem).where(CartItem.cart_id.in_(cart_ids)))
    await db.execute(delete(Cart).where(Cart.user_id == user_id))
    await db.refresh(user, ["addresses"])
    await db.delete(user)
    await db.commit()
    logger.info("Deleted user %s", user_id)
