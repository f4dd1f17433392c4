"""End-to-end checks through HTTP against a real SQLite database."""
import asyncio

import pytest
from sqlalchemy import select

from bookstore.models.book import Book


async def stock_of(session_factory, book_id):
    async with session_factory() as session:
        return await session.scalar(select(Book.stock_quantity).where(Book.id == book_id))


@pytest.mark.asyncio
async def test_order_lifecycle(async_client, auth_headers, session_factory, catalog):
    headers = auth_headers(catalog.alice)
    body = {"items": [
        {"book_id": catalog.dune, "quantity": 1},
        {"book_id": catalog.cosmos, "quantity": "2"},
    ]}

    created = await async_client.post("/transactions", json=body, headers=headers)

    assert created.status_code == 201
    data = created.json()["data"]
    assert data["total_quantity"] == 3
    assert data["total_price"] == pytest.approx(20.0)
    assert await stock_of(session_factory, catalog.cosmos) == 8

    detail = await async_client.get(f"/transactions/{data['transaction_id']}", headers=headers)
    assert detail.status_code == 200
    order = detail.json()["data"]
    assert order["user"]["username"] == "alice"
    assert order["total_price"] == pytest.approx(20.0)
    assert {item["book"]["publisher"] for item in order["order_items"]} == {"Chilton", "Random House"}

    history = await async_client.get("/transactions", headers=headers)
    assert [o["id"] for o in history.json()["data"]] == [data["transaction_id"]]

    # Another user cannot see it
    foreign = await async_client.get(
        f"/transactions/{data['transaction_id']}", headers=auth_headers(catalog.bob)
    )
    assert foreign.status_code == 404


@pytest.mark.asyncio
async def test_insufficient_stock_over_http(async_client, auth_headers, session_factory, catalog):
    body = {"items": [{"book_id": catalog.pamphlet, "quantity": 9}]}

    response = await async_client.post("/transactions", json=body, headers=auth_headers(catalog.alice))

    assert response.status_code == 409
    assert response.json() == {
        "success": False,
        "message": "Stock for 'Pamphlet' is insufficient. Available: 5, Requested: 9.",
    }
    assert await stock_of(session_factory, catalog.pamphlet) == 5


@pytest.mark.asyncio
async def test_soft_deleted_book_over_http(async_client, auth_headers, catalog):
    body = {"items": [{"book_id": catalog.retired, "quantity": 1}]}

    response = await async_client.post("/transactions", json=body, headers=auth_headers(catalog.alice))

    assert response.status_code == 404
    assert response.json()["message"] == "Some books not found or are inactive."


@pytest.mark.asyncio
async def test_concurrent_requests_never_oversell(async_client, auth_headers, session_factory, catalog):
    body = {"items": [{"book_id": catalog.pamphlet, "quantity": 2}]}
    headers = auth_headers(catalog.alice)

    responses = await asyncio.gather(*[
        async_client.post("/transactions", json=body, headers=headers) for _ in range(5)
    ])

    codes = sorted(r.status_code for r in responses)
    assert codes.count(201) == 2
    assert all(code in (409, 500) for code in codes if code != 201)
    assert await stock_of(session_factory, catalog.pamphlet) == 1


@pytest.mark.asyncio
async def test_statistics_over_http(async_client, auth_headers, catalog):
    await async_client.post(
        "/transactions",
        json={"items": [{"book_id": catalog.dune, "quantity": 1}, {"book_id": catalog.cosmos, "quantity": 1}]},
        headers=auth_headers(catalog.alice),
    )
    await async_client.post(
        "/transactions",
        json={"items": [{"book_id": catalog.dune, "quantity": 1}, {"book_id": catalog.cosmos, "quantity": 2}]},
        headers=auth_headers(catalog.bob),
    )

    response = await async_client.get("/transactions/statistics", headers=auth_headers(catalog.bob))

    assert response.status_code == 200
    stats = response.json()["data"]
    assert stats["total_transactions"] == 2
    assert stats["average_transaction_amount"] == pytest.approx(17.5)
    assert stats["most_book_sales_genre"] == "Science"
    assert stats["fewest_book_sales_genre"] == "Fiction"
