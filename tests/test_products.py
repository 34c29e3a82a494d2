"""
Product endpoint tests: covers the CRUD lifecycle, embedded comments,
partial updates, validation, and the optional token gate on writes.

Each test creates the products it needs through the API, so tests are
independent of each other and of execution order.
"""
import pytest
from httpx import AsyncClient

from insightpro.config import settings


async def _create_product(client: AsyncClient, **overrides) -> dict:
    payload = {
        "name": "Widget",
        "company": "Acme",
        "average_rating": 4.0,
        "comments": ["first", "second"],
    }
    payload.update(overrides)
    resp = await client.post("/products", json=payload)
    assert resp.status_code == 201
    return resp.json()


# ---------------------------------------------------------------------------
# Infrastructure / health
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_health(async_client: AsyncClient):
    resp = await async_client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_product(async_client: AsyncClient, product_payload: dict):
    """Creating a product echoes the fields and returns ids for it and its comments."""
    resp = await async_client.post("/products", json=product_payload)
    assert resp.status_code == 201
    product = resp.json()
    assert isinstance(product["id"], int)
    assert product["name"] == "Widget Pro"
    assert product["company"] == "Acme"
    assert product["average_rating"] == 4.5
    assert [c["text"] for c in product["comments"]] == ["a", "b"]
    assert all(isinstance(c["id"], int) for c in product["comments"])


@pytest.mark.asyncio
async def test_create_product_with_empty_comment_list(async_client: AsyncClient):
    product = await _create_product(async_client, comments=[])
    assert product["comments"] == []


@pytest.mark.asyncio
async def test_create_product_rating_as_numeric_string(async_client: AsyncClient):
    product = await _create_product(async_client, average_rating="3.7")
    assert product["average_rating"] == 3.7


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["name", "company", "average_rating", "comments"])
async def test_create_product_missing_field(
    async_client: AsyncClient, product_payload: dict, missing: str
):
    del product_payload[missing]
    resp = await async_client.post("/products", json=product_payload)
    assert resp.status_code == 400
    assert "message" in resp.json()


@pytest.mark.asyncio
async def test_create_product_non_numeric_rating(async_client: AsyncClient, product_payload: dict):
    product_payload["average_rating"] = "great"
    resp = await async_client.post("/products", json=product_payload)
    assert resp.status_code == 400
    assert "average_rating" in resp.json()["message"]


# ---------------------------------------------------------------------------
# Read
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_list_products_empty(async_client: AsyncClient):
    resp = await async_client.get("/products")
    assert resp.status_code == 200
    assert resp.json() == []


@pytest.mark.asyncio
async def test_list_products_embeds_comments(async_client: AsyncClient):
    await _create_product(async_client, name="One", comments=["x"])
    await _create_product(async_client, name="Two", comments=["y", "z"])

    resp = await async_client.get("/products")
    assert resp.status_code == 200
    products = resp.json()
    assert [p["name"] for p in products] == ["One", "Two"]
    assert [c["text"] for c in products[0]["comments"]] == ["x"]
    assert [c["text"] for c in products[1]["comments"]] == ["y", "z"]


@pytest.mark.asyncio
async def test_get_product(async_client: AsyncClient):
    created = await _create_product(async_client)

    resp = await async_client.get(f"/products/{created['id']}")
    assert resp.status_code == 200
    assert resp.json() == created


@pytest.mark.asyncio
async def test_get_product_not_found(async_client: AsyncClient):
    resp = await async_client.get("/products/99999")
    assert resp.status_code == 404
    assert "message" in resp.json()


@pytest.mark.asyncio
async def test_get_product_non_integer_id(async_client: AsyncClient):
    resp = await async_client.get("/products/abc")
    assert resp.status_code == 400


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_update_product_name(async_client: AsyncClient):
    created = await _create_product(async_client)

    resp = await async_client.put(f"/products/{created['id']}", json={"name": "Renamed"})
    assert resp.status_code == 200
    assert "message" in resp.json()

    product = (await async_client.get(f"/products/{created['id']}")).json()
    assert product["name"] == "Renamed"
    assert product["company"] == created["company"]


@pytest.mark.asyncio
async def test_update_product_several_fields(async_client: AsyncClient):
    created = await _create_product(async_client)

    resp = await async_client.put(f"/products/{created['id']}", json={
        "name": "New",
        "average_rating": 1.5,
    })
    assert resp.status_code == 200

    product = (await async_client.get(f"/products/{created['id']}")).json()
    assert product["name"] == "New"
    assert product["average_rating"] == 1.5


@pytest.mark.asyncio
async def test_update_product_empty_body(async_client: AsyncClient):
    created = await _create_product(async_client)
    resp = await async_client.put(f"/products/{created['id']}", json={})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_update_product_only_null_fields(async_client: AsyncClient):
    """Fields sent as null count as not supplied."""
    created = await _create_product(async_client)
    resp = await async_client.put(f"/products/{created['id']}", json={"name": None})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_update_product_comments_not_updatable(async_client: AsyncClient):
    created = await _create_product(async_client)
    resp = await async_client.put(f"/products/{created['id']}", json={"comments": ["new"]})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_update_product_not_found(async_client: AsyncClient):
    resp = await async_client.put("/products/99999", json={"name": "Ghost"})
    assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_delete_product(async_client: AsyncClient):
    created = await _create_product(async_client)

    resp = await async_client.delete(f"/products/{created['id']}")
    assert resp.status_code == 200
    assert str(created["id"]) in resp.json()["message"]

    resp = await async_client.get(f"/products/{created['id']}")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_delete_product_not_found(async_client: AsyncClient):
    resp = await async_client.delete("/products/99999")
    assert resp.status_code == 404
    assert "message" in resp.json()


# ---------------------------------------------------------------------------
# Optional token gate on writes
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_writes_open_by_default(async_client: AsyncClient, product_payload: dict):
    resp = await async_client.post("/products", json=product_payload)
    assert resp.status_code == 201


@pytest.mark.asyncio
async def test_protected_writes_require_token(
    async_client: AsyncClient, product_payload: dict, monkeypatch
):
    monkeypatch.setattr(settings, "PROTECT_PRODUCT_WRITES", True)

    resp = await async_client.post("/products", json=product_payload)
    assert resp.status_code == 401

    resp = await async_client.post(
        "/products", json=product_payload, headers={"Authorization": "Bearer nope"}
    )
    assert resp.status_code == 403

    resp = await async_client.delete("/products/1")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_protected_writes_accept_login_token(
    async_client: AsyncClient, product_payload: dict, auth_token: str, monkeypatch
):
    monkeypatch.setattr(settings, "PROTECT_PRODUCT_WRITES", True)
    headers = {"Authorization": f"Bearer {auth_token}"}

    resp = await async_client.post("/products", json=product_payload, headers=headers)
    assert resp.status_code == 201
    product_id = resp.json()["id"]

    # Reads stay public.
    assert (await async_client.get(f"/products/{product_id}")).status_code == 200

    resp = await async_client.delete(f"/products/{product_id}", headers=headers)
    assert resp.status_code == 200
