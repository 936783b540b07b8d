"""Integration tests for the pet, category and discount endpoints."""

import pytest
from services.petstore_service.models import PetStatus
from tests.factories import DiscountFactory, PetFactory, persist


@pytest.mark.asyncio
@pytest.mark.integration
async def test_browse_pets_without_auth(client, pet):
    response = await client.get("/api/pets", params={"status": "AVAILABLE"})

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["total_elements"] == 1
    assert data["page"] == 0
    assert data["pets"][0]["id"] == str(pet.id)
    assert data["pets"][0]["category"]["name"] == "Dogs"
    assert data["pets"][0]["price"] == "100.00"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_unknown_pet(client):
    response = await client.get("/api/pets/00000000-0000-0000-0000-000000000000")

    assert response.status_code == 404
    assert response.json()["error"] == "Not Found"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_find_by_status_accepts_repeated_param(client, db_session, category):
    await persist(
        db_session,
        PetFactory.create(name="Avail", category_id=category.id),
        PetFactory.create(name="Sold", category_id=category.id, status=PetStatus.SOLD),
    )

    response = await client.get(
        "/api/pets/find-by-status", params=[("status", "AVAILABLE"), ("status", "SOLD")]
    )

    assert response.status_code == 200
    assert sorted(p["name"] for p in response.json()) == ["Avail", "Sold"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_customer_lists_a_pet(client, customer, customer_headers, category):
    response = await client.post(
        "/api/pets",
        headers=customer_headers,
        json={
            "name": "Mochi",
            "category_id": str(category.id),
            "price": "320.50",
            "tags": ["fluffy"],
        },
    )

    assert response.status_code == 201, response.text
    data = response.json()
    assert data["status"] == "AVAILABLE"
    assert data["created_by"] == str(customer.id)

    mine = await client.get("/api/pets/my-pets", headers=customer_headers)
    assert [p["name"] for p in mine.json()] == ["Mochi"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_pet_price_must_be_positive(client, customer_headers, category):
    response = await client.post(
        "/api/pets",
        headers=customer_headers,
        json={"name": "Free", "category_id": str(category.id), "price": "0"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Validation Failed"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_status_change_is_admin_only(client, pet, customer_headers, admin_headers):
    url = f"/api/pets/{pet.id}/status"

    denied = await client.post(url, headers=customer_headers, json={"status": "PENDING"})
    assert denied.status_code == 403

    allowed = await client.post(url, headers=admin_headers, json={"status": "PENDING"})
    assert allowed.status_code == 200, allowed.text
    assert allowed.json()["status"] == "PENDING"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_purchase_pet_directly(client, pet, customer, customer_headers):
    url = f"/api/pets/{pet.id}/purchase"

    first = await client.post(url, headers=customer_headers)
    assert first.status_code == 200, first.text
    assert first.json()["owner_id"] == str(customer.id)

    second = await client.post(url, headers=customer_headers)
    assert second.status_code == 409


@pytest.mark.asyncio
@pytest.mark.integration
async def test_category_crud(client, admin_headers, customer_headers):
    created = await client.post(
        "/api/categories", headers=admin_headers, json={"name": "Birds"}
    )
    assert created.status_code == 201, created.text
    category_id = created.json()["id"]

    duplicate = await client.post(
        "/api/categories", headers=admin_headers, json={"name": "birds"}
    )
    assert duplicate.status_code == 409

    forbidden = await client.delete(
        f"/api/categories/{category_id}", headers=customer_headers
    )
    assert forbidden.status_code == 403

    deleted = await client.delete(f"/api/categories/{category_id}", headers=admin_headers)
    assert deleted.status_code == 204

    again = await client.delete(f"/api/categories/{category_id}", headers=admin_headers)
    assert again.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_category_in_use(client, admin_headers, category, pet):
    response = await client.delete(
        f"/api/categories/{category.id}", headers=admin_headers
    )

    assert response.status_code == 409
    assert "1 pet(s)" in response.json()["message"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_validate_discount_preview(client, db_session, customer_headers):
    await persist(db_session, DiscountFactory.create(code="SAVE10"))

    response = await client.get(
        "/api/discounts/validate",
        headers=customer_headers,
        params={"code": "save10", "total": "150.00"},
    )

    assert response.status_code == 200, response.text
    assert response.json() == {
        "code": "SAVE10",
        "percentage": "10.00",
        "original_total": "150.00",
        "discount_amount": "15.00",
        "new_total": "135.00",
    }

    invalid = await client.get(
        "/api/discounts/validate", headers=customer_headers, params={"code": "NOPE"}
    )
    assert invalid.status_code == 400
    assert invalid.json()["message"] == "Invalid or expired discount code"


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize("field", ["tags", "photo_urls", "name", "price"])
async def test_null_on_required_pet_field_is_rejected(
    client, customer_headers, category, field
):
    created = await client.post(
        "/api/pets",
        headers=customer_headers,
        json={
            "name": "Mochi",
            "category_id": str(category.id),
            "price": "320.50",
            "tags": ["fluffy"],
        },
    )
    pet_id = created.json()["id"]

    response = await client.put(
        f"/api/pets/{pet_id}", headers=customer_headers, json={field: None}
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation Failed"
    assert field in body["message"]

    listing = await client.get("/api/pets")
    assert listing.status_code == 200, listing.text
    pet = listing.json()["pets"][0]
    assert pet["tags"] == ["fluffy"]
    assert pet["name"] == "Mochi"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_description_can_be_cleared(client, customer_headers, category):
    created = await client.post(
        "/api/pets",
        headers=customer_headers,
        json={
            "name": "Mochi",
            "description": "Sleeps a lot",
            "category_id": str(category.id),
            "price": "320.50",
        },
    )

    response = await client.put(
        f"/api/pets/{created.json()['id']}",
        headers=customer_headers,
        json={"description": None, "tags": ["calm"]},
    )

    assert response.status_code == 200, response.text
    assert response.json()["description"] is None
    assert response.json()["tags"] == ["calm"]
