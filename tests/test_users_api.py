# ==============================================================================
# USER ENDPOINT TESTS
# ==============================================================================
# Tests for the seller directory, exports and user removal
# ==============================================================================

import pytest
from httpx import AsyncClient

from conftest import FakeIdentity, FakeStorage, auth_headers, order_payload
from order_desk.core.exceptions import DatabaseError
from order_desk.database.repositories.transaction_repository import (
    TransactionRepository,
)


async def submit(client: AsyncClient, user_id: str, **overrides) -> dict:
    response = await client.post(
        "/api/v1/transactions",
        json=order_payload(**overrides),
        headers=auth_headers(user_id),
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestUserDirectory:
    """Tests for user summaries."""

    @pytest.mark.asyncio
    async def test_list_users(self, client: AsyncClient, admin_headers: dict):
        await submit(client, "user_1")
        await submit(client, "user_2", user_info={"username": "bob", "phone": "555-0100"})

        response = await client.get("/api/v1/users", headers=admin_headers)

        assert response.status_code == 200
        users = response.json()["data"]
        assert [u["owner_id"] for u in users] == ["user_2", "user_1"]
        assert users[0]["username"] == "bob"
        assert users[0]["order_count"] == 1

        response = await client.get(
            "/api/v1/users",
            params={"q": "555"},
            headers=admin_headers,
        )
        assert [u["owner_id"] for u in response.json()["data"]] == ["user_2"]

    @pytest.mark.asyncio
    async def test_user_summary(self, client: AsyncClient, admin_headers: dict):
        order = await submit(client, "user_1")
        await submit(client, "user_1")
        await client.patch(
            f"/api/v1/transactions/{order['id']}/status",
            json={"target_status": "rejected"},
            headers=admin_headers,
        )

        response = await client.get("/api/v1/users/user_1/summary", headers=admin_headers)

        assert response.status_code == 200
        summary = response.json()["data"]
        assert summary["order_count"] == 2
        assert summary["total_usd_value"] == "0.00"

    @pytest.mark.asyncio
    async def test_unknown_user_summary(self, client: AsyncClient, admin_headers: dict):
        response = await client.get("/api/v1/users/ghost/summary", headers=admin_headers)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_directory_requires_admin(self, client: AsyncClient, user_headers: dict):
        response = await client.get("/api/v1/users", headers=user_headers)

        assert response.status_code == 403


class TestExports:
    """Tests for CSV downloads."""

    @pytest.mark.asyncio
    async def test_export_all(self, client: AsyncClient, admin_headers: dict):
        await submit(client, "user_1")
        await submit(client, "user_2")

        response = await client.get("/api/v1/transactions/export", headers=admin_headers)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "orders.csv" in response.headers["content-disposition"]
        lines = response.text.strip().split("\n")
        assert lines[0].startswith("Order ID,")
        assert len(lines) == 3

    @pytest.mark.asyncio
    async def test_export_one_user(self, client: AsyncClient, admin_headers: dict):
        await submit(client, "user_1")
        await submit(client, "user_2")

        response = await client.get("/api/v1/users/user_2/export", headers=admin_headers)

        lines = response.text.strip().split("\n")
        assert len(lines) == 2


class TestDeleteUser:
    """Tests for cascading user removal."""

    @pytest.mark.asyncio
    async def test_delete_user(
        self,
        client: AsyncClient,
        admin_headers: dict,
        storage: FakeStorage,
        identity: FakeIdentity,
    ):
        await submit(client, "user_1")
        await submit(client, "user_1")
        await submit(client, "user_2")

        response = await client.delete("/api/v1/users/user_1", headers=admin_headers)

        assert response.status_code == 200
        report = response.json()["data"]
        assert report["success"] is True
        assert len(report["deleted_ids"]) == 2
        assert report["identity_deleted"] is True
        assert identity.deleted == ["user_1"]
        assert len(storage.calls) == 2
        assert report["dashboard"]["total_orders"] == 1

    @pytest.mark.asyncio
    async def test_partial_failure(
        self,
        client: AsyncClient,
        admin_headers: dict,
        identity: FakeIdentity,
    ):
        from order_desk.api.dependencies import get_repository
        from order_desk.database.factory import DatabaseFactory
        from order_desk.main import app

        kept = await submit(client, "user_1")
        await submit(client, "user_1")

        class FlakyRepository(TransactionRepository):
            async def delete(self, transaction_id: str) -> None:
                if transaction_id == kept["id"]:
                    raise DatabaseError("disk I/O error", operation="delete")
                await super().delete(transaction_id)

        app.dependency_overrides[get_repository] = (
            lambda: FlakyRepository(DatabaseFactory.get_adapter())
        )

        response = await client.delete("/api/v1/users/user_1", headers=admin_headers)

        assert response.status_code == 207
        error = response.json()["error"]
        assert error["code"] == "PARTIAL_FAILURE"
        assert error["details"]["failed_ids"] == [kept["id"]]
        assert len(error["details"]["succeeded_ids"]) == 1
        assert identity.deleted == []
