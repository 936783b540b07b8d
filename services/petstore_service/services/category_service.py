"""Category management."""

import uuid
from typing import Optional

from libs.common.logging import get_logger
from services.petstore_service.exceptions import (
    CategoryAlreadyExists,
    CategoryInUse,
    CategoryNotFound,
    InvalidCategory,
)
from services.petstore_service.models import Category, Pet
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def list_categories(db: AsyncSession) -> list[Category]:
    result = await db.execute(select(Category).order_by(Category.name))
    return list(result.scalars().all())


async def get_category(db: AsyncSession, category_id: uuid.UUID) -> Category:
    category = await db.get(Category, category_id)
    if category is None:
        raise CategoryNotFound(f"Category not found: {category_id}")
    return category


async def _find_by_name(
    db: AsyncSession, name: str, exclude_id: Optional[uuid.UUID] = None
) -> Optional[Category]:
    query = select(Category).where(func.lower(Category.name) == name.lower())
    if exclude_id is not None:
        query = query.where(Category.id != exclude_id)
    result = await db.execute(query)
    return result.scalars().first()


def _clean_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidCategory("Category name must not be blank")
    return cleaned


async def create_category(db: AsyncSession, *, name: str) -> Category:
    name = _clean_name(name)
    if await _find_by_name(db, name):
        raise CategoryAlreadyExists(f"Category with name '{name}' already exists")

    category = Category(name=name)
    db.add(category)
    await db.commit()
    await db.refresh(category)
    logger.info("Created category %s (%s)", category.name, category.id)
    return category


async def update_category(
    db: AsyncSession, *, category_id: uuid.UUID, name: str
) -> Category:
    category = await get_category(db, category_id)
    name = _clean_name(name)
    if await _find_by_name(db, name, exclude_id=category.id):
        raise CategoryAlreadyExists(f"Category with name '{name}' already exists")

    category.name = name
    await db.commit()
    await db.refresh(category)
    return category


async def delete_category(db: AsyncSession, category_id: uuid.UUID) -> None:
    """Delete a category that no pet references."""
    category = await get_category(db, category_id)

    pet_count = (
        await db.execute(
            select(func.count(Pet.id)).where(Pet.category_id == category.id)
        )
    ).scalar_one()
    if pet_count:
        logger.warning(
            "Refusing to delete category %s: %d pet(s) reference it",
            category.id,
            pet_count,
        )
        raise CategoryInUse(
            f"Cannot delete category '{category.name}' (ID: {category.id}) because "
            f"it is currently being used by {pet_count} pet(s)"
        )

    await db.delete(category)
    await db.commit()
    logger.info("Deleted category %s", category_id)
