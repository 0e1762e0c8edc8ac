# ==============================================================================
# CONFTEST - Pytest Fixtures and Configuration
# ==============================================================================
# Shared fixtures for all tests
# ==============================================================================

from __future__ import annotations

import os
import tempfile
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment before importing app
_TEST_DIR = tempfile.mkdtemp(prefix="order_desk_tests_")
os.environ["ENVIRONMENT"] = "development"
os.environ["DEBUG"] = "false"
os.environ["DATABASE_TYPE"] = "sqlite"
os.environ["SQLITE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/test_app.db"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-32chars!"
os.environ["REALIZED_STATUSES"] = "completed"
os.environ["LOG_LEVEL"] = "WARNING"

from order_desk.core.constants import DatabaseConstants  # noqa: E402
from order_desk.core.exceptions import DependencyFailureError  # noqa: E402
from order_desk.core.security import create_access_token  # noqa: E402
from order_desk.database.adapters.sqlite_adapter import SQLiteAdapter  # noqa: E402
from order_desk.database.repositories.transaction_repository import (  # noqa: E402
    TransactionRepository,
)
from order_desk.domain_models.transaction import TransactionRecord  # noqa: E402
from order_desk.integrations.price_oracle import CoinGeckoPriceOracle  # noqa: E402
from order_desk.schemas.transaction import Transaction  # noqa: E402
from order_desk.services.aggregation import RealizedValuePolicy  # noqa: E402
from order_desk.services.deletion_service import DeletionService  # noqa: E402
from order_desk.services.statistics_service import StatisticsService  # noqa: E402
from order_desk.services.transaction_service import TransactionService  # noqa: E402


BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


# ==============================================================================
# FAKE EXTERNAL SERVICES
# ==============================================================================

class FakeStorage:
    """Object storage double that records every delete call."""

    def __init__(self) -> None:
        self.calls: List[str] = []
        self.fail = False

    async def delete(self, reference: str) -> None:
        self.calls.append(reference)
        if self.fail:
            raise DependencyFailureError(
                message="storage unavailable",
                dependency="object storage",
                operation="delete",
            )

    async def close(self) -> None:
        return None


class FakeIdentity:
    """Identity directory double."""

    def __init__(self) -> None:
        self.deleted: List[str] = []
        self.fail = False

    async def delete_user(self, user_id: str) -> None:
        if self.fail:
            raise DependencyFailureError(
                message="identity provider unavailable",
                dependency="identity provider",
                operation="delete_user",
            )
        self.deleted.append(user_id)

    async def close(self) -> None:
        return None


def price_transport(usd: float = 1.0, inr: float = 83.0) -> httpx.MockTransport:
    """Mock CoinGecko simple price endpoint."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"pi-network": {"usd": usd, "inr": inr}})

    return httpx.MockTransport(handler)


def make_transaction(
    id: str = "t1",
    owner_id: str = "user_1",
    status: str = "pending",
    pi_amount: Optional[str] = "100",
    usd_value: Optional[str] = "50.00",
    inr_value: Optional[str] = "4150.00",
    minutes: int = 0,
    username: Optional[str] = "alice",
    email: Optional[str] = "alice@example.com",
    phone: Optional[str] = "+91 98765 43210",
    payment_identifier: str = "alice@upi",
    proof_image_ref: Optional[str] = "https://res.cloudinary.com/demo/image/upload/v1/proofs/t1.jpg",
) -> Transaction:
    """In-memory order for the pure engines."""
    return Transaction(
        id=id,
        owner_id=owner_id,
        status=status,
        pi_amount=pi_amount,
        usd_value=usd_value,
        inr_value=inr_value,
        sell_rate_usd="0.5",
        sell_rate_inr="41.5",
        payment_identifier=payment_identifier,
        proof_image_ref=proof_image_ref,
        user_info={"username": username, "email": email, "phone": phone},
        created_at=BASE_TIME + timedelta(minutes=minutes),
        updated_at=BASE_TIME + timedelta(minutes=minutes),
    )


def order_payload(**overrides) -> Dict:
    """Order submission body."""
    payload = {
        "pi_amount": "100",
        "payment_identifier": "alice@upi",
        "proof_image_ref": "https://res.cloudinary.com/demo/image/upload/v1712/proofs/abc.jpg",
        "sell_rate_usd": "0.5",
        "sell_rate_inr": "41.5",
        "user_info": {
            "username": "alice",
            "email": "alice@example.com",
            "phone": "+91 98765 43210",
        },
    }
    payload.update(overrides)
    return payload


def auth_headers(user_id: str, role: Optional[str] = None) -> Dict[str, str]:
    claims = {"role": role} if role else None
    token = create_access_token(subject=user_id, additional_claims=claims)
    return {"Authorization": f"Bearer {token}"}


# ==============================================================================
# STORE & SERVICE FIXTURES
# ==============================================================================

@pytest_asyncio.fixture
async def adapter(tmp_path) -> AsyncGenerator[SQLiteAdapter, None]:
    """Connected SQLite adapter on a per-test database file."""
    db = SQLiteAdapter(f"sqlite+aiosqlite:///{tmp_path}/orders.db")
    db.register_model(DatabaseConstants.TRANSACTIONS_COLLECTION, TransactionRecord)
    await db.connect()
    yield db
    await db.disconnect()


@pytest.fixture
def repository(adapter: SQLiteAdapter) -> TransactionRepository:
    return TransactionRepository(adapter)


@pytest.fixture
def statistics(repository: TransactionRepository) -> StatisticsService:
    return StatisticsService(repository, RealizedValuePolicy())


@pytest.fixture
def transaction_service(
    repository: TransactionRepository,
    statistics: StatisticsService,
) -> TransactionService:
    return TransactionService(repository, statistics)


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def identity() -> FakeIdentity:
    return FakeIdentity()


@pytest.fixture
def deletion_service(
    repository: TransactionRepository,
    statistics: StatisticsService,
    storage: FakeStorage,
    identity: FakeIdentity,
) -> DeletionService:
    return DeletionService(
        repository,
        storage,
        statistics=statistics,
        identity=identity,
    )


# ==============================================================================
# HTTP CLIENT FIXTURES
# ==============================================================================

@pytest_asyncio.fixture
async def client(
    tmp_path,
    storage: FakeStorage,
    identity: FakeIdentity,
) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    from order_desk.api.dependencies import (
        get_identity_client,
        get_price_oracle,
        get_storage_client,
    )
    from order_desk.database.factory import DatabaseFactory
    from order_desk.main import app

    # Reset factory to ensure clean state
    DatabaseFactory.reset()
    await DatabaseFactory.initialize(
        database_url=f"sqlite+aiosqlite:///{tmp_path}/api.db",
    )

    oracle = CoinGeckoPriceOracle(transport=price_transport())
    app.dependency_overrides[get_storage_client] = lambda: storage
    app.dependency_overrides[get_identity_client] = lambda: identity
    app.dependency_overrides[get_price_oracle] = lambda: oracle

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        timeout=30.0,
    ) as async_client:
        yield async_client

    # Cleanup
    app.dependency_overrides.clear()
    await oracle.close()
    await DatabaseFactory.shutdown()
    DatabaseFactory.reset()


@pytest.fixture
def admin_headers() -> Dict[str, str]:
    return auth_headers("admin_1", role="admin")


@pytest.fixture
def user_headers() -> Dict[str, str]:
    return auth_headers("user_1")


@pytest.fixture
def other_user_headers() -> Dict[str, str]:
    return auth_headers("user_2")
