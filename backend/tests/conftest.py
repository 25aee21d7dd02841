"""
Pytest fixtures for test database, client, and seed data.

Each test gets a fresh in-memory SQLite database; the app's DB dependency is
overridden to use that test's session.
"""

import itertools
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from rental_api.db.base import Base
from rental_api.db.session import get_db
from rental_api.helpers.payment import generate_payment_code
from rental_api.main import app
from rental_api.models import Category, History, User, Vehicle
from rental_api.services import history_service

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def today():
    return datetime.now(timezone.utc).date()


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables on a private in-memory database, yield a session."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def distinct_payment_codes(monkeypatch):
    """
    Requests in a test can land in the same millisecond; advance the clock
    for every generated code so the unique constraint never trips.
    """
    clock = itertools.count(1_700_000_000_000)

    def fake_generate(vehicle_name: str) -> str:
        return generate_payment_code(vehicle_name, timestamp_ms=next(clock))

    monkeypatch.setattr(history_service, "generate_payment_code", fake_generate)


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    user = User(email="renter@example.com", fullname="Test Renter")
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def category(db_session: AsyncSession) -> Category:
    category = Category(name="Motorbike")
    db_session.add(category)
    await db_session.commit()
    await db_session.refresh(category)
    return category


@pytest_asyncio.fixture
async def make_vehicle(db_session: AsyncSession, category: Category):
    async def _make(**overrides) -> Vehicle:
        fields = {
            "name": "Honda Vario",
            "category_id": category.id,
            "image": "uploads/vario.png",
            "price": 1000,
            "qty": 5,
            "prepayment": True,
        }
        fields.update(overrides)
        vehicle = Vehicle(**fields)
        db_session.add(vehicle)
        await db_session.commit()
        await db_session.refresh(vehicle)
        return vehicle

    return _make


@pytest_asyncio.fixture
async def vehicle(make_vehicle) -> Vehicle:
    """Vehicle priced 1000 with 5 units in stock that accepts prepayment."""
    return await make_vehicle()


@pytest_asyncio.fixture
async def make_history(db_session: AsyncSession, test_user: User):
    codes = itertools.count(1)

    async def _make(vehicle: Vehicle, **overrides) -> History:
        start = today() + timedelta(days=1)
        fields = {
            "user_id": test_user.id,
            "vehicle_id": vehicle.id,
            "payment_code": f"SEED{next(codes)}",
            "payment": True,
            "returned": False,
            "prepayment": 0,
            "qty": 1,
            "start_rent": start,
            "end_rent": start + timedelta(days=3),
        }
        fields.update(overrides)
        history = History(**fields)
        db_session.add(history)
        await db_session.commit()
        await db_session.refresh(history)
        return history

    return _make


@pytest.fixture
def booking_payload(test_user, vehicle):
    """Valid create body: fully paid, one unit, three days starting tomorrow."""
    start = today() + timedelta(days=1)
    return {
        "user_id": test_user.id,
        "vehicle_id": vehicle.id,
        "payment": True,
        "returned": False,
        "prepayment": 0,
        "qty": 1,
        "start_rent": start.isoformat(),
        "end_rent": (start + timedelta(days=3)).isoformat(),
    }
