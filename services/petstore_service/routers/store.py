"""Store router: cart, checkout, payment and order management."""

import uuid
from typing import Optional

from fastapi import APIRouter, Body, Depends, status
from libs.auth.dependencies import require_admin, require_customer, require_member
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.petstore_service.schemas import (
    CartResponse,
    CheckoutRequest,
    DeliveryStatusUpdate,
    OrderResponse,
    PaymentRequest,
)
from services.petstore_service.services import cart_service, order_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/store", tags=["store"])


def _owner_scope(user: AuthUser) -> Optional[uuid.UUID]:
    """Admins see every order; customers only their own."""
    return None if user.is_admin else user.user_id


# ============================================================================
# CART
# ============================================================================


@router.get("/cart", response_model=CartResponse)
async def get_cart(
    current_user: AuthUser = Depends(require_customer),
    db: AsyncSession = Depends(get_async_db),
):
    return await cart_service.get_cart(db, current_user.user_id)


@router.post(
    "/cart/items/{pet_id}",
    response_model=CartResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_pet_to_cart(
    pet_id: uuid.UUID,
    current_user: AuthUser = Depends(require_customer),
    db: AsyncSession = Depends(get_async_db),
):
    return await cart_service.add_pet_to_cart(
        db, user_id=current_user.user_id, pet_id=pet_id
    )


@router.delete("/cart/items/{item_id}", response_model=CartResponse)
async def remove_cart_item(
    item_id: uuid.UUID,
    current_user: AuthUser = Depends(require_customer),
    db: AsyncSession = Depends(get_async_db),
):
    return await cart_service.remove_cart_item(
        db, user_id=current_user.user_id, item_id=item_id
    )


# ============================================================================
# CHECKOUT & PAYMENT
# ============================================================================


@router.post(
    "/checkout", response_model=OrderResponse, status_code=status.HTTP_201_CREATED
)
async def checkout(
    payload: Optional[CheckoutRequest] = Body(None),
    current_user: AuthUser = Depends(require_customer),
    db: AsyncSession = Depends(get_async_db),
):
    """Convert the caller's cart into a PLACED order."""
    discount_code = payload.discount_code if payload else None
    return await order_service.checkout(db, current_user.user_id, discount_code)


@router.post("/orders/{order_id}/pay", response_model=OrderResponse)
async def pay_order(
    order_id: uuid.UUID,
    payload: PaymentRequest,
    current_user: AuthUser = Depends(require_customer),
    db: AsyncSession = Depends(get_async_db),
):
    return await order_service.make_payment(
        db, order_id, payload, user_id=current_user.user_id
    )


# ============================================================================
# ORDERS
# ============================================================================


@router.get("/orders", response_model=list[OrderResponse])
async def list_orders(
    current_user: AuthUser = Depends(require_member),
    db: AsyncSession = Depends(get_async_db),
):
    return await order_service.list_orders(db, user_id=_owner_scope(current_user))


@router.get("/orders/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: uuid.UUID,
    current_user: AuthUser = Depends(require_member),
    db: AsyncSession = Depends(get_async_db),
):
    return await order_service.get_order(
        db, order_id, user_id=_owner_scope(current_user)
    )


@router.post("/orders/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: uuid.UUID,
    current_user: AuthUser = Depends(require_member),
    db: AsyncSession = Depends(get_async_db),
):
    return await order_service.cancel_order(
        db,
        order_id,
        user_id=_owner_scope(current_user),
        performed_by=current_user.user_id,
    )


@router.delete("/orders/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(
    order_id: uuid.UUID,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await order_service.delete_order(db, order_id)


@router.patch("/orders/{order_id}/delivery-status", response_model=OrderResponse)
async def update_delivery_status(
    order_id: uuid.UUID,
    payload: DeliveryStatusUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await order_service.update_delivery_status(
        db,
        order_id,
        payload.status,
        at=payload.at,
        performed_by=current_user.user_id,
    )
