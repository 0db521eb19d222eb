"""Integration tests for categorization and rule endpoints."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest
from httpx import AsyncClient

from home_budget.core.exceptions import ClassifierUnavailableError
from home_budget.models.transaction import Transaction
from home_budget.repositories.transaction import TransactionRepository

CATEGORIZE_PAYLOAD = {
    "description": "LIDL SP Z OO WARSZAWA",
    "amount": "-54.20",
    "date": "2024-05-03",
    "counterparty_name": "Lidl",
}


@pytest.mark.asyncio
async def test_categorize_single(client: AsyncClient, categories, fake_classifier, make_reply):
    groceries_id = str(categories["Groceries"].id)
    fake_classifier.replies = [make_reply(groceries_id, "Lidl", "Groceries at Lidl", 0.9)]

    response = await client.post("/api/v1/categorize", json=CATEGORIZE_PAYLOAD)

    assert response.status_code == 200
    data = response.json()
    assert data["category_id"] == groceries_id
    assert data["category_source"] == "ai"
    assert data["display_name"] == "Lidl"
    assert data["confidence"] == 0.9


@pytest.mark.asyncio
async def test_categorize_without_categories(client: AsyncClient, setup_database, fake_classifier):
    response = await client.post("/api/v1/categorize", json=CATEGORIZE_PAYLOAD)

    assert response.status_code == 409
    assert response.json()["error_code"] == "CAT_001"
    assert fake_classifier.calls == 0


@pytest.mark.asyncio
async def test_categorize_classifier_down(client: AsyncClient, categories, fake_classifier):
    fake_classifier.replies = [ClassifierUnavailableError()]

    response = await client.post("/api/v1/categorize", json=CATEGORIZE_PAYLOAD)

    assert response.status_code == 502
    assert response.json()["error_code"] == "CAT_002"
    assert response.json()["retry_allowed"] is True


@pytest.mark.asyncio
async def test_batch_and_status(client: AsyncClient, db_session, categories, fake_classifier, make_reply):
    groceries_id = str(categories["Groceries"].id)
    repo = TransactionRepository(db_session)
    for day in range(1, 4):
        await repo.create(
            Transaction(
                raw_description=f"LIDL {day}",
                amount=Decimal("-10.00"),
                transaction_date=date(2024, 5, day),
            )
        )
    fake_classifier.replies = [make_reply(groceries_id)]

    status = await client.get("/api/v1/categorize/batch")
    assert status.json() == {"uncategorized": 3, "categorized": 0, "total": 3}

    response = await client.post("/api/v1/categorize/batch", json={"limit": 2})

    assert response.status_code == 200
    data = response.json()
    assert data["categorized"] == 2
    assert data["errors"] == 0
    assert data["remaining"] == 1
    assert data["has_more"] is True
    assert data["next_offset"] == 0

    response = await client.post("/api/v1/categorize/batch")
    assert response.json()["categorized"] == 1
    assert response.json()["has_more"] is False

    status = await client.get("/api/v1/categorize/batch")
    assert status.json() == {"uncategorized": 0, "categorized": 3, "total": 3}


@pytest.mark.asyncio
async def test_batch_limit_validation(client: AsyncClient, setup_database):
    response = await client.post("/api/v1/categorize/batch", json={"limit": 501})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_promote_and_list_rules(client: AsyncClient, db_session, categories):
    subscriptions_id = str(categories["Subscriptions"].id)
    await TransactionRepository(db_session).create(
        Transaction(
            raw_description="SPOTIFY",
            counterparty_account="PL1234",
            amount=Decimal("-23.99"),
            transaction_date=date(2024, 5, 1),
        )
    )

    response = await client.post(
        "/api/v1/categorization-rules",
        json={"counterparty_account": "pl12 34", "category_id": subscriptions_id},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["counterparty_account"] == "PL1234"
    assert data["updated_transactions_count"] == 1

    listing = await client.get("/api/v1/categorization-rules")
    assert listing.json()["pagination"]["total"] == 1
    assert listing.json()["rules"][0]["category_id"] == subscriptions_id


@pytest.mark.asyncio
async def test_promote_rule_unknown_category(client: AsyncClient, categories):
    response = await client.post(
        "/api/v1/categorization-rules",
        json={"counterparty_account": "PL1234", "category_id": str(uuid4())},
    )

    assert response.status_code == 404
    assert response.json()["error_code"] == "CAT_003"


@pytest.mark.asyncio
async def test_delete_rule(client: AsyncClient, categories):
    created = await client.post(
        "/api/v1/categorization-rules",
        json={"counterparty_account": "PL1234", "category_id": str(categories["Other"].id)},
    )
    rule_id = created.json()["rule_id"]

    response = await client.delete(f"/api/v1/categorization-rules/{rule_id}")
    assert response.status_code == 204

    response = await client.delete(f"/api/v1/categorization-rules/{rule_id}")
    assert response.status_code == 404
    assert response.json()["error_code"] == "CAT_004"
