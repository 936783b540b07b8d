"""Order lifecycle: checkout, payment, delivery tracking and cancellation.

Every operation that touches more than one row runs in a single transaction
and rolls back completely on failure.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import ensure_utc, utc_now
from libs.common.logging import get_logger
from services.petstore_service.exceptions import (
    CartEmpty,
    InvalidDeliveryTransition,
    OrderNotFound,
    OrderOwnership,
    OrderStatusConflict,
    PetAlreadySold,
)
from services.petstore_service.generators import (
    OrderNumberGenerator,
    get_order_number_generator,
)
from services.petstore_service.models import (
    AuditAction,
    AuditEntityType,
    Delivery,
    DeliveryStatus,
    Order,
    OrderItem,
    OrderStatus,
    Payment,
    PaymentStatus,
    PetStatus,
)
from services.petstore_service.payments import PaymentStrategyFactory
from services.petstore_service.schemas import PaymentRequest
from services.petstore_service.services import (
    address_service,
    cart_service,
    discount_service,
    pet_service,
)
from services.petstore_service.services.audit_service import log_audit
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

# Allowed forward step for each delivery status
DELIVERY_TRANSITIONS = {
    DeliveryStatus.PENDING: DeliveryStatus.SHIPPED,
    DeliveryStatus.SHIPPED: DeliveryStatus.DELIVERED,
}

_payment_strategies = PaymentStrategyFactory()


# ============================================================================
# QUERIES
# ============================================================================


async def _load_order(db: AsyncSession, order_id: uuid.UUID) -> Optional[Order]:
    result = await db.execute(
        select(Order)
        .where(Order.id == order_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_order(
    db: AsyncSession, order_id: uuid.UUID, user_id: Optional[uuid.UUID] = None
) -> Order:
    """Fetch an order; when ``user_id`` is given it must be that user's order."""
    order = await _load_order(db, order_id)
    if order is None:
        raise OrderNotFound(f"Order with id {order_id} not found.")
    if user_id is not None and order.user_id != user_id:
        raise OrderNotFound(f"Order with id {order_id} not found for user {user_id}.")
    return order


async def list_orders(
    db: AsyncSession, user_id: Optional[uuid.UUID] = None
) -> list[Order]:
    query = select(Order).order_by(Order.created_at.desc())
    if user_id is not None:
        query = query.where(Order.user_id == user_id)
    result = await db.execute(query)
    return list(result.scalars().all())


async def is_order_owned_by_user(
    db: AsyncSession, order_id: uuid.UUID, user_id: uuid.UUID
) -> bool:
    result = await db.execute(
        select(Order.id).where(Order.id == order_id, Order.user_id == user_id)
    )
    return result.scalar_one_or_none() is not None


async def is_address_used(db: AsyncSession, address_id: uuid.UUID) -> bool:
    return await address_service.is_address_used(db, address_id)


# ============================================================================
# CHECKOUT
# ============================================================================


async def checkout(
    db: AsyncSession,
    user_id: uuid.UUID,
    discount_code: Optional[str] = None,
    generator: Optional[OrderNumberGenerator] = None,
) -> Order:
    """Turn the user's cart into a PLACED order and delete the cart."""
    generator = generator or get_order_number_generator()

    try:
        cart = await cart_service.get_cart(db, user_id)
        if not cart.items:
            raise CartEmpty(f"Cart is empty for user with ID: {user_id}")

        total = discount_service.quantize(
            sum((item.price for item in cart.items), Decimal("0.00"))
        )

        discount = None
        discount_amount = None
        if discount_code and discount_code.strip():
            discount = await discount_service.validate_discount(db, discount_code)
            discount_amount = discount_service.calculate_discount(
                total, discount.percentage
            )
            total = discount_service.quantize(total - discount_amount)

        for item in cart.items:
            if item.pet.status != PetStatus.AVAILABLE or item.pet.owner_id is not None:
                raise PetAlreadySold(
                    f"Pet with ID '{item.pet_id}' has already been sold."
                )

        order = Order(
            order_number=generator.generate(),
            user_id=user_id,
            status=OrderStatus.PLACED,
            total_amount=total,
            discount_id=discount.id if discount else None,
            discount_code=discount.code if discount else None,
            discount_percentage=discount.percentage if discount else None,
            discount_amount=discount_amount,
            items=[
                OrderItem(pet_id=item.pet_id, price=item.price) for item in cart.items
            ],
        )
        db.add(order)
        await db.flush()

        await db.delete(cart)
        await log_audit(
            db,
            entity_type=AuditEntityType.ORDER,
            entity_id=order.id,
            action=AuditAction.CREATE_ORDER,
            performed_by=user_id,
            old_value=None,
            new_value=OrderStatus.PLACED.value,
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "Checkout created order %s for user %s (total=%s, discount=%s)",
        order.order_number,
        user_id,
        total,
        order.discount_code,
    )
    return await get_order(db, order.id)


# ============================================================================
# PAYMENT
# ============================================================================


async def make_payment(
    db: AsyncSession,
    order_id: uuid.UUID,
    request: PaymentRequest,
    user_id: Optional[uuid.UUID] = None,
    strategies: Optional[PaymentStrategyFactory] = None,
) -> Order:
    """Pay for a PLACED order.

    Sells every ordered pet to the buyer, approves the order and opens a
    PENDING delivery to the shipping address.
    """
    strategies = strategies or _payment_strategies

    try:
        order = await get_order(db, order_id)
        if user_id is not None and order.user_id != user_id:
            raise OrderOwnership(
                f"User with id {user_id} does not own order with id {order_id}."
            )
        if order.status != OrderStatus.PLACED:
            raise OrderStatusConflict(
                f"Order {order.order_number} cannot be paid in status "
                f"{order.status.value}"
            )

        strategy = strategies.get(request.payment_type)
        strategy.validate(request)

        buyer_id = order.user_id
        payment = Payment(
            amount=order.total_amount,
            status=PaymentStatus.SUCCESS,
            payment_type=strategy.payment_type,
            payment_note=request.payment_note,
            paid_at=utc_now(),
        )
        strategy.process(payment, request)
        order.payment = payment

        for item in order.items:
            await pet_service.mark_sold(db, pet_id=item.pet_id, buyer_id=buyer_id)
            await log_audit(
                db,
                entity_type=AuditEntityType.PET,
                entity_id=item.pet_id,
                action=AuditAction.CHANGE_PET_STATUS,
                performed_by=buyer_id,
                old_value=PetStatus.AVAILABLE.value,
                new_value=PetStatus.SOLD.value,
            )

        shipping = await address_service.get_address(
            db, address_id=request.shipping_address_id, user_id=buyer_id
        )
        billing = shipping
        if request.billing_address_id is not None:
            billing = await address_service.get_address(
                db, address_id=request.billing_address_id, user_id=buyer_id
            )

        order.status = OrderStatus.APPROVED
        order.shipping_address_id = shipping.id
        order.billing_address_id = billing.id

        order.delivery = Delivery(
            name=shipping.full_name,
            phone=shipping.phone_number,
            address=shipping.as_text(),
            status=DeliveryStatus.PENDING,
        )
        await log_audit(
            db,
            entity_type=AuditEntityType.ORDER,
            entity_id=order.id,
            action=AuditAction.CHECKOUT_ORDER,
            performed_by=buyer_id,
            old_value=OrderStatus.PLACED.value,
            new_value=OrderStatus.APPROVED.value,
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "Order %s paid via %s (%s)",
        order.order_number,
        strategy.payment_type.value,
        payment.payment_note,
    )
    return await get_order(db, order_id)


# ============================================================================
# DELIVERY & CANCELLATION
# ============================================================================


async def update_delivery_status(
    db: AsyncSession,
    order_id: uuid.UUID,
    new_status: DeliveryStatus,
    at: Optional[datetime] = None,
    performed_by: Optional[uuid.UUID] = None,
) -> Order:
    """Advance the order's delivery one step: PENDING -> SHIPPED -> DELIVERED."""
    try:
        order = await get_order(db, order_id)
        delivery = order.delivery
        if delivery is None:
            raise InvalidDeliveryTransition(
                f"Order {order.order_number} has no delivery to update"
            )

        old_status = delivery.status
        if DELIVERY_TRANSITIONS.get(old_status) != new_status:
            raise InvalidDeliveryTransition(
                f"Cannot change delivery status from {old_status.value} "
                f"to {new_status.value}"
            )

        stamp = ensure_utc(at) if at else utc_now()
        delivery.status = new_status
        if new_status == DeliveryStatus.SHIPPED:
            delivery.shipped_at = stamp
        elif new_status == DeliveryStatus.DELIVERED:
            delivery.delivered_at = stamp
            order.status = OrderStatus.DELIVERED

        await log_audit(
            db,
            entity_type=AuditEntityType.DELIVERY,
            entity_id=delivery.id,
            action=AuditAction.UPDATE_DELIVERY_STATUS,
            performed_by=performed_by,
            old_value=old_status.value,
            new_value=new_status.value,
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "Order %s delivery %s -> %s",
        order.order_number,
        old_status.value,
        new_status.value,
    )
    return await get_order(db, order_id)


async def cancel_order(
    db: AsyncSession,
    order_id: uuid.UUID,
    user_id: Optional[uuid.UUID] = None,
    performed_by: Optional[uuid.UUID] = None,
) -> Order:
    order = await get_order(db, order_id, user_id=user_id)
    old_status = order.status
    order.status = OrderStatus.CANCELLED

    await log_audit(
        db,
        entity_type=AuditEntityType.ORDER,
        entity_id=order.id,
        action=AuditAction.CANCEL_ORDER,
        performed_by=performed_by or user_id,
        old_value=old_status.value,
        new_value=OrderStatus.CANCELLED.value,
    )
    await db.commit()
    logger.info("Order %s cancelled (was %s)", order.order_number, old_status.value)
    return await get_order(db, order_id)


async def delete_order(db: AsyncSession, order_id: uuid.UUID) -> None:
    """Soft delete: the order is kept and marked CANCELLED."""
    order = await get_order(db, order_id)
    order.status = OrderStatus.CANCELLED
    await db.commit()
    logger.info("Order %s deleted (cancelled)", order.order_number)
