"""Shopping cart operations."""

import uuid
from typing import Optional

from libs.common.logging import get_logger
from services.petstore_service.exceptions import (
    CartItemNotFound,
    PetAlreadyInCart,
    PetAlreadySold,
    UserCartNotFound,
)
from services.petstore_service.models import Cart, CartItem, PetStatus
from services.petstore_service.services.pet_service import get_pet
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def find_cart(db: AsyncSession, user_id: uuid.UUID) -> Optional[Cart]:
    result = await db.execute(
        select(Cart)
        .where(Cart.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_cart(db: AsyncSession, user_id: uuid.UUID) -> Cart:
    cart = await find_cart(db, user_id)
    if cart is None:
        raise UserCartNotFound(f"Cart not found for user with ID '{user_id}'")
    return cart


async def add_pet_to_cart(
    db: AsyncSession, *, user_id: uuid.UUID, pet_id: uuid.UUID
) -> Cart:
    """Add a pet to the user's cart, creating the cart on first use."""
    pet = await get_pet(db, pet_id)
    if pet.status == PetStatus.SOLD or pet.owner_id is not None:
        raise PetAlreadySold(f"Pet with ID '{pet_id}' has already been sold.")

    cart = await find_cart(db, user_id)
    if cart is None:
        cart = Cart(user_id=user_id)
        db.add(cart)
    elif any(item.pet_id == pet.id for item in cart.items):
        raise PetAlreadyInCart(f"Pet with ID '{pet_id}' is already in the user's cart.")

    cart.items.append(CartItem(pet_id=pet.id, price=pet.price))
    await db.commit()

    logger.info("Added pet %s to cart %s", pet.id, cart.id)
    return await get_cart(db, user_id)


async def remove_cart_item(
    db: AsyncSession, *, user_id: uuid.UUID, item_id: uuid.UUID
) -> Cart:
    cart = await find_cart(db, user_id)
    item = await db.get(CartItem, item_id)
    if cart is None or item is None or item.cart_id != cart.id:
        raise CartItemNotFound(f"Cart item with ID '{item_id}' not found")

    await db.delete(item)
    await db.commit()
    return await get_cart(db, user_id)
