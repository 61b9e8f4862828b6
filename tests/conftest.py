"""Fixtures for the API tests: a throwaway SQLite database per test and an in-memory Redis."""
import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from washline.core.redis import get_redis
from washline.db.base import Base
from washline.db.session import get_db
import washline.models  # noqa: F401

# Postgres URL for the row-locking tests (postgresql+asyncpg://...); skipped when unset
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL")


class FakeRedis:
    """The subset of redis.asyncio.Redis the app uses."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key):
        return self.store.get(key)

    async def setex(self, key, ttl, value):
        self.store[key] = value
        self.ttls[key] = ttl

    async def delete(self, *keys):
        for key in keys:
            self.store.pop(key, None)

    async def aclose(self):
        pass


@pytest.fixture
def db_url(tmp_path):
    path = tmp_path / "washline.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def client(db_url, fake_redis):
    """Test client with get_db / get_redis pointed at the throwaway stores."""
    from washline.main import app

    engine = create_async_engine(db_url, poolclass=NullPool)
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def override_get_redis():
        return fake_redis

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = override_get_redis
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def create_order(client):
    """POST an order and return its data; records are given as (quantity, wash_type) pairs."""

    def _create(quantity=100, records=(), **extra):
        body = {
            "customerId": "CUST-1",
            "quantity": quantity,
            "date": "2026-10-01",
            "deliveryDate": "2026-10-15",
            "records": [
                {"quantity": q, "washType": wash, "processTypes": ["S/B"]} for q, wash in records
            ],
            **extra,
        }
        r = client.post("/api/v1/orders", json=body)
        assert r.status_code == 201, r.text
        return r.json()["data"]

    return _create


@pytest.fixture
def create_record(client):
    def _create(order_id, quantity, wash_type="N/W", process_types=("S/B",)):
        r = client.post(
            f"/api/v1/orders/{order_id}/records",
            json={"quantity": quantity, "washType": wash_type, "processTypes": list(process_types)},
        )
        assert r.status_code == 201, r.text
        return r.json()["data"]

    return _create


@pytest.fixture
def create_assignment(client):
    def _create(record_id, quantity, assigned_by_id=7):
        r = client.post(
            f"/api/v1/records/{record_id}/assignments",
            json={"assignedById": assigned_by_id, "quantity": quantity, "washingMachine": "WM-1"},
        )
        assert r.status_code == 201, r.text
        return r.json()["data"]

    return _create
