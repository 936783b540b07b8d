"""User address book."""

import uuid

from libs.common.logging import get_logger
from services.petstore_service.exceptions import AddressInUse, AddressNotFound
from services.petstore_service.models import Address, Order
from services.petstore_service.schemas import AddressCreate, AddressUpdate
from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def list_addresses(db: AsyncSession, user_id: uuid.UUID) -> list[Address]:
    result = await db.execute(
        select(Address)
        .where(Address.user_id == user_id)
        .order_by(Address.is_default.desc(), Address.created_at)
    )
    return list(result.scalars().all())


async def get_address(
    db: AsyncSession, *, address_id: uuid.UUID, user_id: uuid.UUID
) -> Address:
    """Fetch an address owned by ``user_id``; other users' addresses are not found."""
    address = await db.get(Address, address_id)
    if address is None or address.user_id != user_id:
        raise AddressNotFound(f"Address not found with id: {address_id}")
    return address


async def _clear_default(
    db: AsyncSession, user_id: uuid.UUID, keep_id: uuid.UUID | None = None
) -> None:
    query = update(Address).where(
        Address.user_id == user_id, Address.is_default.is_(True)
    )
    if keep_id is not None:
        query = query.where(Address.id != keep_id)
    await db.execute(query.values(is_default=False))


async def create_address(
    db: AsyncSession, *, user_id: uuid.UUID, data: AddressCreate
) -> Address:
    """Add an address. The first address a user saves becomes the default."""
    existing = (
        await db.execute(
            select(func.count(Address.id)).where(Address.user_id == user_id)
        )
    ).scalar_one()

    is_default = data.is_default or existing == 0
    if is_default:
        await _clear_default(db, user_id)

    address = Address(user_id=user_id, **data.model_dump(exclude={"is_default"}))
    address.is_default = is_default
    db.add(address)
    await db.commit()
    await db.refresh(address)

    logger.info("Created address %s for user %s", address.id, user_id)
    return address


async def update_address(
    db: AsyncSession,
    *,
    address_id: uuid.UUID,
    user_id: uuid.UUID,
    data: AddressUpdate,
) -> Address:
    address = await get_address(db, address_id=address_id, user_id=user_id)

    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("is_default"):
        await _clear_default(db, user_id, keep_id=address.id)

    for field, value in update_data.items():
        setattr(address, field, value)

    await db.commit()
    await db.refresh(address)
    return address


async def is_address_used(db: AsyncSession, address_id: uuid.UUID) -> bool:
    """True when any order ships or bills to the address."""
    result = await db.execute(
        select(func.count(Order.id)).where(
            or_(
                Order.shipping_address_id == address_id,
                Order.billing_address_id == address_id,
            )
        )
    )
    return result.scalar_one() > 0


async def delete_address(
    db: AsyncSession, *, address_id: uuid.UUID, user_id: uuid.UUID
) -> None:
    address = await get_address(db, address_id=address_id, user_id=user_id)
    if await is_address_used(db, address.id):
        raise AddressInUse(
            f"Cannot delete address with ID '{address.id}' because it is "
            "associated with existing orders"
        )

    await db.delete(address)
    await db.commit()
    logger.info("Deleted address %s for user %s", address_id, user_id)
