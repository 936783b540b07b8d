"""Pet catalog: search, CRUD and the guarded sale transition."""

import math
import uuid
from typing import Optional, Sequence

from libs.auth.models import AuthUser
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.petstore_service.exceptions import (
    AccessDenied,
    PetAlreadySold,
    PetInUse,
    PetNotFound,
)
from services.petstore_service.models import (
    AuditAction,
    AuditEntityType,
    CartItem,
    OrderItem,
    Pet,
    PetStatus,
)
from services.petstore_service.schemas import PetCreate, PetUpdate
from services.petstore_service.services import category_service
from services.petstore_service.services.audit_service import log_audit
from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

LATEST_PETS_LIMIT = 6


async def get_pet(db: AsyncSession, pet_id: uuid.UUID) -> Pet:
    pet = await db.get(Pet, pet_id)
    if pet is None:
        raise PetNotFound(f"Pet not found with ID '{pet_id}'")
    return pet


async def search_pets(
    db: AsyncSession,
    *,
    name: Optional[str] = None,
    category_id: Optional[uuid.UUID] = None,
    status: Optional[PetStatus] = None,
    owner_id: Optional[uuid.UUID] = None,
    page: int = 0,
    size: int = 10,
) -> tuple[list[Pet], int, int]:
    """Filter pets and return ``(pets, total_elements, total_pages)``.

    ``page`` is zero-based.
    """
    filters = []
    if name:
        filters.append(Pet.name.ilike(f"%{name.strip()}%"))
    if category_id is not None:
        filters.append(Pet.category_id == category_id)
    if status is not None:
        filters.append(Pet.status == status)
    if owner_id is not None:
        filters.append(Pet.owner_id == owner_id)

    total = (
        await db.execute(select(func.count(Pet.id)).where(*filters))
    ).scalar_one()

    result = await db.execute(
        select(Pet)
        .where(*filters)
        .order_by(Pet.created_at.desc(), Pet.name)
        .offset(page * size)
        .limit(size)
    )
    total_pages = math.ceil(total / size) if size else 0
    return list(result.scalars().all()), total, total_pages


async def latest_pets(db: AsyncSession, limit: int = LATEST_PETS_LIMIT) -> list[Pet]:
    """Most recently listed pets that are still for sale."""
    result = await db.execute(
        select(Pet)
        .where(Pet.status == PetStatus.AVAILABLE)
        .order_by(Pet.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def find_by_status(
    db: AsyncSession, statuses: Sequence[PetStatus]
) -> list[Pet]:
    result = await db.execute(
        select(Pet).where(Pet.status.in_(list(statuses))).order_by(Pet.name)
    )
    return list(result.scalars().all())


async def my_pets(db: AsyncSession, user_id: uuid.UUID) -> list[Pet]:
    """Pets the user bought or listed."""
    result = await db.execute(
        select(Pet)
        .where(or_(Pet.owner_id == user_id, Pet.created_by == user_id))
        .order_by(Pet.created_at.desc())
    )
    return list(result.scalars().all())


async def create_pet(
    db: AsyncSession, *, data: PetCreate, created_by: uuid.UUID
) -> Pet:
    await category_service.get_category(db, data.category_id)

    pet = Pet(
        name=data.name.strip(),
        description=data.description,
        category_id=data.category_id,
        price=data.price,
        photo_urls=list(data.photo_urls),
        tags=list(data.tags),
        status=PetStatus.AVAILABLE,
        created_by=created_by,
        last_modified_by=created_by,
    )
    db.add(pet)
    await db.commit()
    pet = await get_pet_fresh(db, pet.id)

    logger.info("Created pet %s (%s) by %s", pet.id, pet.name, created_by)
    return pet


async def get_pet_fresh(db: AsyncSession, pet_id: uuid.UUID) -> Pet:
    """Reload a pet and its category from the database."""
    result = await db.execute(
        select(Pet)
        .where(Pet.id == pet_id)
        .execution_options(populate_existing=True)
    )
    pet = result.scalar_one_or_none()
    if pet is None:
        raise PetNotFound(f"Pet not found with ID '{pet_id}'")
    return pet


async def update_pet(
    db: AsyncSession, *, pet_id: uuid.UUID, data: PetUpdate, actor: AuthUser
) -> Pet:
    """Update pet details. Only admins and the pet's creator may do this."""
    pet = await get_pet(db, pet_id)
    if not actor.is_admin and pet.created_by != actor.user_id:
        raise AccessDenied("You can only update pets you created")

    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("category_id") is not None:
        await category_service.get_category(db, update_data["category_id"])

    for field, value in update_data.items():
        setattr(pet, field, value)
    pet.last_modified_by = actor.user_id

    await db.commit()
    return await get_pet_fresh(db, pet.id)


async def update_pet_status(
    db: AsyncSession,
    *,
    pet_id: uuid.UUID,
    status: PetStatus,
    performed_by: uuid.UUID,
) -> Pet:
    pet = await get_pet(db, pet_id)
    old_status = pet.status
    pet.status = status
    pet.last_modified_by = performed_by

    await log_audit(
        db,
        entity_type=AuditEntityType.PET,
        entity_id=pet.id,
        action=AuditAction.CHANGE_PET_STATUS,
        performed_by=performed_by,
        old_value=old_status.value,
        new_value=status.value,
    )
    await db.commit()
    logger.info("Pet %s status %s -> %s", pet.id, old_status.value, status.value)
    return await get_pet_fresh(db, pet.id)


async def delete_pet(db: AsyncSession, pet_id: uuid.UUID) -> None:
    pet = await get_pet(db, pet_id)

    ordered = (
        await db.execute(
            select(func.count(OrderItem.id)).where(OrderItem.pet_id == pet.id)
        )
    ).scalar_one()
    if ordered:
        raise PetInUse(
            f"Cannot delete pet '{pet.name}' (ID: {pet.id}) because it appears "
            f"in {ordered} order(s)"
        )

    await db.execute(delete(CartItem).where(CartItem.pet_id == pet.id))
    await db.delete(pet)
    await db.commit()
    logger.info("Deleted pet %s", pet_id)


async def mark_sold(
    db: AsyncSession, *, pet_id: uuid.UUID, buyer_id: uuid.UUID
) -> Pet:
    """AVAILABLE -> SOLD with ``owner = buyer``, as a single conditional update.

    Raises ``PetAlreadySold`` when the pet is not available or already owned.
    Does not commit; returns the reloaded pet.
    """
    result = await db.execute(
        update(Pet)
        .where(
            Pet.id == pet_id,
            Pet.status == PetStatus.AVAILABLE,
            Pet.owner_id.is_(None),
        )
        .values(
            status=PetStatus.SOLD,
            owner_id=buyer_id,
            last_modified_by=buyer_id,
            updated_at=utc_now(),
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        logger.warning("Pet %s could not be sold to %s", pet_id, buyer_id)
        raise PetAlreadySold(f"Pet with ID '{pet_id}' has already been sold.")
    return await db.get(Pet, pet_id, populate_existing=True)


async def purchase_pet(
    db: AsyncSession, *, pet_id: uuid.UUID, buyer_id: uuid.UUID
) -> Pet:
    """Buy a single pet directly, outside the cart flow."""
    pet = await get_pet(db, pet_id)
    old_status = pet.status
    try:
        await mark_sold(db, pet_id=pet.id, buyer_id=buyer_id)
        await log_audit(
            db,
            entity_type=AuditEntityType.PET,
            entity_id=pet.id,
            action=AuditAction.PURCHASE_PET,
            performed_by=buyer_id,
            old_value=old_status.value,
            new_value=PetStatus.SOLD.value,
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("Pet %s purchased by %s", pet_id, buyer_id)
    return await get_pet_fresh(db, pet_id)
