"""Integration tests for the cart -> checkout -> payment -> delivery flow."""

from decimal import Decimal

import pytest
from tests.factories import (
    AddressFactory,
    DiscountFactory,
    PetFactory,
    bearer,
    persist,
)


async def _fill_cart(client, headers, *pets):
    for pet in pets:
        response = await client.post(f"/api/store/cart/items/{pet.id}", headers=headers)
        assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
@pytest.mark.integration
async def test_full_purchase_flow(
    client, db_session, customer, customer_headers, admin_headers, category, address
):
    dog = PetFactory.create(name="Biscuit", category_id=category.id)
    cat = PetFactory.create(
        name="Whiskers", category_id=category.id, price=Decimal("50.00")
    )
    await persist(db_session, dog, cat, DiscountFactory.create(code="SAVE10"))

    cart = await _fill_cart(client, customer_headers, dog, cat)
    assert cart["total"] == "150.00"
    assert {item["pet"]["name"] for item in cart["items"]} == {"Biscuit", "Whiskers"}

    checkout = await client.post(
        "/api/store/checkout",
        headers=customer_headers,
        json={"discount_code": "save10"},
    )
    assert checkout.status_code == 201, checkout.text
    order = checkout.json()
    assert order["status"] == "PLACED"
    assert order["order_number"].startswith("ORD-")
    assert order["total_amount"] == "135.00"
    assert order["discount_code"] == "SAVE10"
    assert order["discount_amount"] == "15.00"
    assert order["payment"] is None

    gone = await client.get("/api/store/cart", headers=customer_headers)
    assert gone.status_code == 404

    paid = await client.post(
        f"/api/store/orders/{order['id']}/pay",
        headers=customer_headers,
        json={
            "shipping_address_id": str(address.id),
            "payment_type": "credit_card",
            "card_number": "4111-1111-1111-4242",
        },
    )
    assert paid.status_code == 200, paid.text
    paid_order = paid.json()
    assert paid_order["status"] == "APPROVED"
    assert paid_order["payment"]["amount"] == "135.00"
    assert paid_order["payment"]["payment_type"] == "CREDIT_CARD"
    assert paid_order["payment"]["payment_note"] == "**** **** **** 4242"
    assert paid_order["delivery"]["status"] == "PENDING"

    biscuit = await client.get(f"/api/pets/{dog.id}")
    assert biscuit.json()["status"] == "SOLD"
    assert biscuit.json()["owner_id"] == str(customer.id)

    delivery_url = f"/api/store/orders/{order['id']}/delivery-status"
    denied = await client.patch(
        delivery_url, headers=customer_headers, json={"status": "SHIPPED"}
    )
    assert denied.status_code == 403

    shipped = await client.patch(
        delivery_url, headers=admin_headers, json={"status": "SHIPPED"}
    )
    assert shipped.status_code == 200, shipped.text
    assert shipped.json()["delivery"]["shipped_at"] is not None

    delivered = await client.patch(
        delivery_url, headers=admin_headers, json={"status": "DELIVERED"}
    )
    assert delivered.json()["delivery"]["status"] == "DELIVERED"
    assert delivered.json()["status"] == "DELIVERED"

    order_audit = await client.get(
        "/api/audit-logs",
        headers=admin_headers,
        params={"entity_type": "ORDER", "entity_id": order["id"]},
    )
    assert order_audit.status_code == 200
    assert sorted(log["action"] for log in order_audit.json()) == [
        "CHECKOUT_ORDER",
        "CREATE_ORDER",
    ]

    delivery_audit = await client.get(
        "/api/audit-logs",
        headers=admin_headers,
        params={"entity_type": "DELIVERY"},
    )
    assert [(log["old_value"], log["new_value"]) for log in delivery_audit.json()] == [
        ("SHIPPED", "DELIVERED"),
        ("PENDING", "SHIPPED"),
    ]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_checkout_empty_cart(client, customer_headers):
    response = await client.post("/api/store/checkout", headers=customer_headers)

    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_invalid_discount_keeps_cart(client, customer_headers, pet):
    await _fill_cart(client, customer_headers, pet)

    response = await client.post(
        "/api/store/checkout",
        headers=customer_headers,
        json={"discount_code": "BOGUS"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid or expired discount code"
    cart = await client.get("/api/store/cart", headers=customer_headers)
    assert len(cart.json()["items"]) == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_payment_missing_card_number(client, customer_headers, pet, address):
    address_id = str(address.id)
    await _fill_cart(client, customer_headers, pet)
    order = (await client.post("/api/store/checkout", headers=customer_headers)).json()

    response = await client.post(
        f"/api/store/orders/{order['id']}/pay",
        headers=customer_headers,
        json={"shipping_address_id": address_id, "payment_type": "DEBIT_CARD"},
    )

    assert response.status_code == 400
    still_placed = await client.get(
        f"/api/store/orders/{order['id']}", headers=customer_headers
    )
    assert still_placed.json()["status"] == "PLACED"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_orders_are_scoped_to_owner(
    client, db_session, customer_headers, other_customer, admin_headers, pet
):
    await _fill_cart(client, customer_headers, pet)
    order = (await client.post("/api/store/checkout", headers=customer_headers)).json()
    other_headers = bearer(other_customer)

    hidden = await client.get(f"/api/store/orders/{order['id']}", headers=other_headers)
    assert hidden.status_code == 404

    mine = await client.get("/api/store/orders", headers=other_headers)
    assert mine.json() == []

    everything = await client.get("/api/store/orders", headers=admin_headers)
    assert [o["id"] for o in everything.json()] == [order["id"]]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_pay_with_someone_elses_address(
    client, db_session, customer_headers, other_customer, pet
):
    foreign = await persist(
        db_session, AddressFactory.create(user_id=other_customer.id)
    )
    foreign_id = str(foreign.id)
    await _fill_cart(client, customer_headers, pet)
    order = (await client.post("/api/store/checkout", headers=customer_headers)).json()

    response = await client.post(
        f"/api/store/orders/{order['id']}/pay",
        headers=customer_headers,
        json={
            "shipping_address_id": foreign_id,
            "payment_type": "PAYPAL",
            "paypal_id": "me@paypal",
        },
    )

    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_cancel_and_admin_delete(client, customer_headers, admin_headers, pet):
    await _fill_cart(client, customer_headers, pet)
    order = (await client.post("/api/store/checkout", headers=customer_headers)).json()

    cancelled = await client.post(
        f"/api/store/orders/{order['id']}/cancel", headers=customer_headers
    )
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "CANCELLED"

    forbidden = await client.delete(
        f"/api/store/orders/{order['id']}", headers=customer_headers
    )
    assert forbidden.status_code == 403

    deleted = await client.delete(
        f"/api/store/orders/{order['id']}", headers=admin_headers
    )
    assert deleted.status_code == 204
