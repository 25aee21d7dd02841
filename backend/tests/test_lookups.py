"""
Tests for vehicle stock lookups and the statements they issue.
"""

import pytest
from sqlalchemy import event
from sqlalchemy.dialects import postgresql

from rental_api.repositories import lookups


@pytest.fixture
def recorded_sql(db_session):
    """Collect every statement the session executes, compiled for PostgreSQL."""
    statements = []

    def record(orm_execute_state):
        compiled = orm_execute_state.statement.compile(dialect=postgresql.dialect())
        statements.append(str(compiled))

    event.listen(db_session.sync_session, "do_orm_execute", record)
    yield statements
    event.remove(db_session.sync_session, "do_orm_execute", record)


@pytest.mark.asyncio
async def test_locked_lookup_sums_bookings_after_taking_the_lock(db_session, vehicle, make_history, recorded_sql):
    await make_history(vehicle, qty=2)
    await make_history(vehicle, qty=1, returned=True)
    recorded_sql.clear()

    stock = await lookups.get_vehicle(db_session, vehicle.id, lock=True)

    assert stock.booked == 2
    assert stock.available == 3

    lock_sql, booked_sql = recorded_sql
    assert "FOR UPDATE" in lock_sql
    assert "sum(" not in lock_sql.lower()
    assert "sum(" in booked_sql.lower()
    assert "FOR UPDATE" not in booked_sql


@pytest.mark.asyncio
async def test_unlocked_lookup(db_session, vehicle, recorded_sql):
    recorded_sql.clear()
    stock = await lookups.get_vehicle(db_session, vehicle.id)

    assert stock.booked == 0
    assert stock.name == "Honda Vario"
    assert not any("FOR UPDATE" in sql for sql in recorded_sql)


@pytest.mark.asyncio
async def test_missing_vehicle_skips_booked_sum(db_session, recorded_sql):
    assert await lookups.get_vehicle(db_session, 99999, lock=True) is None
    assert len(recorded_sql) == 1
