"""Unit tests for order_service.checkout (cart -> order)."""

from datetime import timedelta
from decimal import Decimal

import pytest
from libs.common.datetime_utils import utc_now
from services.petstore_service.exceptions import (
    CartEmpty,
    InvalidDiscount,
    PetAlreadySold,
    UserCartNotFound,
)
from services.petstore_service.generators import SequentialOrderNumberGenerator
from services.petstore_service.models import AuditAction, OrderStatus
from services.petstore_service.services import (
    audit_service,
    cart_service,
    discount_service,
    order_service,
    pet_service,
)
from tests.factories import DiscountFactory, PetFactory, persist


async def _fill_cart(db, user, category, *prices):
    pets = []
    for price in prices:
        pet = await persist(
            db, PetFactory.create(category_id=category.id, price=Decimal(price))
        )
        await cart_service.add_pet_to_cart(db, user_id=user.id, pet_id=pet.id)
        pets.append(pet)
    return pets


@pytest.mark.asyncio
@pytest.mark.unit
async def test_checkout_without_discount(db_session, customer, category):
    pets = await _fill_cart(db_session, customer, category, "100.00", "50.00")

    order = await order_service.checkout(db_session, customer.id)

    assert order.status == OrderStatus.PLACED
    assert order.total_amount == Decimal("150.00")
    assert order.discount_id is None
    assert order.discount_amount is None
    assert order.order_number.startswith("ORD-")
    assert sorted(item.pet_id for item in order.items) == sorted(p.id for p in pets)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_checkout_applies_discount_snapshot(db_session, customer, category):
    await _fill_cart(db_session, customer, category, "100.00", "50.00")
    discount = await persist(db_session, DiscountFactory.create(code="SAVE10"))

    order = await order_service.checkout(db_session, customer.id, "save10")

    assert order.total_amount == Decimal("135.00")
    assert order.discount_amount == Decimal("15.00")
    assert order.discount_code == "SAVE10"
    assert order.discount_percentage == Decimal("10.00")
    assert order.discount_id == discount.id


@pytest.mark.asyncio
@pytest.mark.unit
async def test_checkout_deletes_cart_and_audits(db_session, customer, category):
    await _fill_cart(db_session, customer, category, "80.00")

    order = await order_service.checkout(db_session, customer.id)

    assert await cart_service.find_cart(db_session, customer.id) is None
    logs = await audit_service.list_audit_logs(db_session, entity_id=order.id)
    assert len(logs) == 1
    assert logs[0].action == AuditAction.CREATE_ORDER
    assert logs[0].old_value is None
    assert logs[0].new_value == "PLACED"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_discount_edit_does_not_change_placed_order(
    db_session, customer, category
):
    await _fill_cart(db_session, customer, category, "200.00")
    discount = await persist(db_session, DiscountFactory.create(code="SAVE10"))
    order = await order_service.checkout(db_session, customer.id, "SAVE10")

    discount.percentage = Decimal("50.00")
    await db_session.commit()

    reloaded = await order_service.get_order(db_session, order.id)
    assert reloaded.discount_percentage == Decimal("10.00")
    assert reloaded.total_amount == Decimal("180.00")


@pytest.mark.asyncio
@pytest.mark.unit
@pytest.mark.parametrize(
    "overrides",
    [
        {"active": False},
        {"valid_to": utc_now() - timedelta(days=1)},
        {"valid_from": utc_now() + timedelta(days=1)},
    ],
    ids=["inactive", "expired", "not-yet-valid"],
)
async def test_checkout_rejects_unusable_discount(
    db_session, customer, category, overrides
):
    await _fill_cart(db_session, customer, category, "100.00")
    await persist(db_session, DiscountFactory.create(code="SAVE10", **overrides))
    customer_id = customer.id

    with pytest.raises(InvalidDiscount):
        await order_service.checkout(db_session, customer_id, "SAVE10")

    assert await order_service.list_orders(db_session) == []
    cart = await cart_service.get_cart(db_session, customer_id)
    assert len(cart.items) == 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_checkout_rejects_unknown_discount(db_session, customer, category):
    await _fill_cart(db_session, customer, category, "100.00")

    with pytest.raises(InvalidDiscount):
        await order_service.checkout(db_session, customer.id, "NOPE")

    assert await order_service.list_orders(db_session) == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_checkout_blank_discount_is_ignored(db_session, customer, category):
    await _fill_cart(db_session, customer, category, "100.00")

    order = await order_service.checkout(db_session, customer.id, "   ")

    assert order.total_amount == Decimal("100.00")
    assert order.discount_code is None


@pytest.mark.asyncio
@pytest.mark.unit
async def test_checkout_without_cart(db_session, customer):
    with pytest.raises(UserCartNotFound):
        await order_service.checkout(db_session, customer.id)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_checkout_empty_cart(db_session, customer, category):
    await _fill_cart(db_session, customer, category, "100.00")
    cart = await cart_service.get_cart(db_session, customer.id)
    await cart_service.remove_cart_item(
        db_session, user_id=customer.id, item_id=cart.items[0].id
    )

    with pytest.raises(CartEmpty):
        await order_service.checkout(db_session, customer.id)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_checkout_fails_when_pet_sold_meanwhile(
    db_session, customer, other_customer, category
):
    (pet,) = await _fill_cart(db_session, customer, category, "100.00")
    await pet_service.purchase_pet(db_session, pet_id=pet.id, buyer_id=other_customer.id)

    with pytest.raises(PetAlreadySold):
        await order_service.checkout(db_session, customer.id)

    assert await order_service.list_orders(db_session) == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_checkout_uses_given_generator(db_session, customer, category):
    await _fill_cart(db_session, customer, category, "10.00")
    generator = SequentialOrderNumberGenerator(clock=lambda: 1700000000.0)

    order = await order_service.checkout(db_session, customer.id, generator=generator)

    assert order.order_number == "ORD-1700000000-00001"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_preview_matches_checkout_math(db_session):
    await persist(db_session, DiscountFactory.create(code="HALF", percentage=Decimal("12.50")))

    preview = await discount_service.preview_discount(
        db_session, code="half", total=Decimal("99.99")
    )

    # 99.99 * 12.5% = 12.49875 -> 12.50
    assert preview.discount_amount == Decimal("12.50")
    assert preview.new_total == Decimal("87.49")
