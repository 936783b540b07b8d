"""Seeding of the default admin, categories and sample pets."""

import pytest
from services.petstore_service.models import Category, Pet, User
from services.petstore_service.seed_data import (
    DEFAULT_CATEGORIES,
    SAMPLE_PETS,
    seed_all,
)
from sqlalchemy import func, select


async def _count(db, model) -> int:
    return (await db.execute(select(func.count(model.id)))).scalar_one()


@pytest.mark.asyncio
@pytest.mark.unit
async def test_seed_all_is_idempotent(db_session):
    await seed_all(db_session)
    await seed_all(db_session)

    assert await _count(db_session, Category) == len(DEFAULT_CATEGORIES)
    assert await _count(db_session, Pet) == len(SAMPLE_PETS)

    admins = (await db_session.execute(select(User))).scalars().all()
    assert len(admins) == 1
    assert admins[0].roles == ["ADMIN"]
