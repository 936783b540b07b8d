"""Seed the default admin, categories and sample pets.

Idempotent: existing rows are left alone.

Usage:
    python -m services.petstore_service.seed_data
"""

import asyncio
from decimal import Decimal

from libs.auth.security import hash_password
from libs.common.config import get_settings
from libs.common.logging import configure_logging, get_logger
from libs.db.config import AsyncSessionLocal
from services.petstore_service.models import Category, Pet, PetStatus, Role, User
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

DEFAULT_CATEGORIES = ["Dogs", "Cats", "Birds", "Fish", "Reptiles", "Small Pets"]

# (name, category, price, tags)
SAMPLE_PETS = [
    ("Golden Retriever - Sunny Buddy", "Dogs", "1200.00", ["friendly", "large"]),
    ("German Shepherd - Brave Rex", "Dogs", "1500.00", ["loyal", "guard-dog"]),
    ("Labrador - Happy Bella", "Dogs", "1000.00", ["gentle", "active"]),
    ("Persian Cat - Royal Luna", "Cats", "800.00", ["long-hair", "calm"]),
    ("Siamese Cat - Mister Milo", "Cats", "600.00", ["vocal", "social"]),
    ("Canary - Golden Song", "Birds", "150.00", ["singing", "small"]),
    ("Parrot - Talking Rio", "Birds", "500.00", ["talking", "colorful"]),
    ("Goldfish - Golden Bubbles", "Fish", "25.00", ["easy-care", "peaceful"]),
    ("Betta Fish - Blue Sapphire", "Fish", "15.00", ["colorful", "low-maintenance"]),
]


async def seed_admin(db: AsyncSession) -> User:
    settings = get_settings()
    email = settings.ADMIN_EMAIL.lower()
    admin = (
        await db.execute(select(User).where(func.lower(User.email) == email))
    ).scalar_one_or_none()
    if admin is not None:
        logger.info("Admin user already exists, skipping creation")
        return admin

    admin = User(
        email=email,
        password_hash=hash_password(settings.ADMIN_PASSWORD),
        first_name="Admin",
        last_name="User",
        roles=[Role.ADMIN.value],
    )
    db.add(admin)
    await db.flush()
    logger.info("Created default admin user %s", email)
    return admin


async def seed_categories(db: AsyncSession) -> dict[str, Category]:
    existing = {
        c.name: c for c in (await db.execute(select(Category))).scalars().all()
    }
    for name in DEFAULT_CATEGORIES:
        if name not in existing:
            category = Category(name=name)
            db.add(category)
            existing[name] = category
            logger.info("Created default category %s", name)
    await db.flush()
    return existing


async def seed_pets(
    db: AsyncSession, categories: dict[str, Category], admin: User
) -> int:
    pet_count = (await db.execute(select(func.count(Pet.id)))).scalar_one()
    if pet_count:
        logger.info("Pets already exist (%d), skipping sample pets", pet_count)
        return 0

    for name, category_name, price, tags in SAMPLE_PETS:
        db.add(
            Pet(
                name=name,
                description=f"{name} is looking for a loving home.",
                category_id=categories[category_name].id,
                price=Decimal(price),
                status=PetStatus.AVAILABLE,
                tags=tags,
                photo_urls=[],
                created_by=admin.id,
                last_modified_by=admin.id,
            )
        )
    return len(SAMPLE_PETS)


async def seed_all(db: AsyncSession) -> None:
    admin = await seed_admin(db)
    categories = await seed_categories(db)
    created = await seed_pets(db, categories, admin)
    await db.commit()
    logger.info("Seed complete (%d sample pets created)", created)


async def main() -> None:
    configure_logging()
    async with AsyncSessionLocal() as db:
        await seed_all(db)


if __name__ == "__main__":
    asyncio.run(main())
