"""Unit tests for user_service."""

import uuid

import pytest
from libs.auth.models import AuthUser
from libs.auth.security import decode_access_token, verify_password
from services.petstore_service.exceptions import (
    AccessDenied,
    AuthenticationFailed,
    EmailAlreadyInUse,
    UserInUse,
    UserNotFound,
)
from services.petstore_service.models import Address, Cart, Role
from services.petstore_service.schemas import UserRegister, UserUpdate
from services.petstore_service.services import cart_service, user_service
from sqlalchemy import func, select
from tests.factories import DEFAULT_PASSWORD, AddressFactory, PetFactory, persist


def _actor(user) -> AuthUser:
    return AuthUser(sub=user.id, email=user.email, roles=user.roles)


def _registration(**overrides) -> UserRegister:
    data = {
        "email": "Alice@Example.com",
        "password": "s3cret-pass",
        "first_name": "Alice",
        "last_name": "Tan",
    }
    data.update(overrides)
    return UserRegister(**data)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_register_creates_plain_user(db_session):
    user = await user_service.register_user(db_session, data=_registration())

    assert user.email == "alice@example.com"
    assert user.roles == [Role.USER.value]
    assert user.password_hash != "s3cret-pass"
    assert verify_password("s3cret-pass", user.password_hash)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_register_rejects_duplicate_email_any_case(db_session):
    await user_service.register_user(db_session, data=_registration())

    with pytest.raises(EmailAlreadyInUse):
        await user_service.register_user(
            db_session, data=_registration(email="ALICE@example.COM")
        )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_authenticate(db_session, customer):
    user = await user_service.authenticate(
        db_session, email=customer.email.upper(), password=DEFAULT_PASSWORD
    )
    assert user.id == customer.id


@pytest.mark.asyncio
@pytest.mark.unit
@pytest.mark.parametrize("known_email", [True, False], ids=["wrong-password", "unknown-email"])
async def test_authenticate_failures_share_message(db_session, customer, known_email):
    email = customer.email if known_email else "nobody@example.com"

    with pytest.raises(AuthenticationFailed) as exc_info:
        await user_service.authenticate(db_session, email=email, password="wrong-pass")

    assert exc_info.value.message == "Invalid email or password"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_issue_token_carries_identity(admin):
    token = user_service.issue_token(admin)

    claims = decode_access_token(token.access_token)
    assert claims["sub"] == str(admin.id)
    assert claims["email"] == admin.email
    assert claims["roles"] == ["ADMIN"]
    assert token.token_type == "Bearer"
    assert token.user.id == admin.id


@pytest.mark.asyncio
@pytest.mark.unit
async def test_user_can_update_own_profile(db_session, customer):
    updated = await user_service.update_user(
        db_session,
        user_id=customer.id,
        data=UserUpdate(first_name="Renamed", password="new-password"),
        actor=_actor(customer),
    )

    assert updated.first_name == "Renamed"
    assert verify_password("new-password", updated.password_hash)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_user_cannot_update_someone_else(db_session, customer, other_customer):
    with pytest.raises(AccessDenied):
        await user_service.update_user(
            db_session,
            user_id=other_customer.id,
            data=UserUpdate(first_name="Nope"),
            actor=_actor(customer),
        )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_only_admin_changes_roles(db_session, customer, admin):
    with pytest.raises(AccessDenied):
        await user_service.update_user(
            db_session,
            user_id=customer.id,
            data=UserUpdate(roles=[Role.ADMIN]),
            actor=_actor(customer),
        )

    promoted = await user_service.update_user(
        db_session,
        user_id=customer.id,
        data=UserUpdate(roles=[Role.USER, Role.ADMIN]),
        actor=_actor(admin),
    )
    assert promoted.roles == ["ADMIN", "USER"]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_update_email_conflict(db_session, customer, other_customer):
    with pytest.raises(EmailAlreadyInUse):
        await user_service.update_user(
            db_session,
            user_id=customer.id,
            data=UserUpdate(email=other_customer.email),
            actor=_actor(customer),
        )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_delete_user_with_created_pets_is_refused(db_session, customer, category):
    await persist(
        db_session,
        PetFactory.create(category_id=category.id, created_by=customer.id),
        PetFactory.create(category_id=category.id, created_by=customer.id),
    )

    with pytest.raises(UserInUse) as exc_info:
        await user_service.delete_user(db_session, customer.id)

    message = exc_info.value.message
    assert customer.email in message
    assert "created 2 pet(s)" in message


@pytest.mark.asyncio
@pytest.mark.unit
async def test_delete_user_removes_cart_and_addresses(db_session, customer, pet):
    user_id = customer.id
    await persist(db_session, AddressFactory.create(user_id=user_id))
    await cart_service.add_pet_to_cart(db_session, user_id=user_id, pet_id=pet.id)

    await user_service.delete_user(db_session, user_id)

    carts = await db_session.execute(
        select(func.count(Cart.id)).where(Cart.user_id == user_id)
    )
    addresses = await db_session.execute(
        select(func.count(Address.id)).where(Address.user_id == user_id)
    )
    assert carts.scalar_one() == 0
    assert addresses.scalar_one() == 0

    with pytest.raises(UserNotFound):
        await user_service.delete_user(db_session, user_id)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_get_unknown_user(db_session):
    with pytest.raises(UserNotFound):
        await user_service.get_user(db_session, uuid.uuid4())
