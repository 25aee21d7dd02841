"""
History persistence.

Write helpers commit their own statement and report the affected row count,
so callers can tell "nothing happened" apart from success.
"""

from typing import Any, Mapping, Optional

from sqlalchemy import asc, delete, desc, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rental_api.models.history import History
from rental_api.models.vehicle import Vehicle
from rental_api.repositories.results import WriteResult

histories_table = History.__table__

# sort parameter -> column, applied in this order
SORTABLE_COLUMNS = {
    "sort_date": History.start_rent,
    "sort_name": Vehicle.name,
    "sort_returned": History.returned,
    "sort_payment": History.payment,
}

_DIRECTIONS = {"asc": asc, "desc": desc}


def _offset(limit: int, page: int) -> int:
    return (page - 1) * limit


async def get_histories(db: AsyncSession, user_id: int, limit: int, page: int) -> list[History]:
    result = await db.execute(
        select(History)
        .where(History.user_id == user_id)
        .order_by(History.created_at.desc(), History.id.desc())
        .offset(_offset(limit, page))
        .limit(limit)
    )
    return list(result.scalars().all())


async def count_histories(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(
        select(func.count()).select_from(History).where(History.user_id == user_id)
    )
    return result.scalar_one()


async def get_history(db: AsyncSession, history_id: int) -> Optional[History]:
    result = await db.execute(
        select(History)
        .where(History.id == history_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def add_history(db: AsyncSession, data: Mapping[str, Any]) -> WriteResult:
    result = await db.execute(insert(histories_table).values(**data))
    await db.commit()
    inserted = result.inserted_primary_key
    insert_id = inserted[0] if inserted else None
    # Some drivers report -1 for INSERT .. RETURNING; a generated key means one row
    affected = 1 if insert_id is not None else max(result.rowcount, 0)
    return WriteResult(affected_rows=affected, insert_id=insert_id)


async def update_history(db: AsyncSession, history_id: int, data: Mapping[str, Any]) -> WriteResult:
    result = await db.execute(
        update(histories_table)
        .where(histories_table.c.id == history_id)
        .values(**data)
    )
    await db.commit()
    return WriteResult(affected_rows=result.rowcount)


async def delete_history(db: AsyncSession, history_id: int) -> WriteResult:
    result = await db.execute(
        delete(histories_table).where(histories_table.c.id == history_id)
    )
    await db.commit()
    return WriteResult(affected_rows=result.rowcount)


def _filter_conditions(filters: Mapping[str, Any]) -> list:
    conditions = []
    if filters.get("user_id") is not None:
        conditions.append(History.user_id == filters["user_id"])
    if filters.get("category_id") is not None:
        conditions.append(Vehicle.category_id == filters["category_id"])
    if filters.get("vehicle_name"):
        conditions.append(Vehicle.name.icontains(filters["vehicle_name"], autoescape=True))
    return conditions


def _ordering(filters: Mapping[str, Any]) -> list:
    ordering = []
    for param, column in SORTABLE_COLUMNS.items():
        direction = _DIRECTIONS.get(str(filters.get(param, "")).lower())
        if direction is not None:
            ordering.append(direction(column))
    ordering.append(History.id.desc())
    return ordering


async def get_filtered_histories(
    db: AsyncSession,
    filters: Mapping[str, Any],
    limit: int,
    page: int,
) -> list[dict]:
    query = (
        select(
            History.id,
            History.user_id,
            History.vehicle_id,
            History.payment_code,
            History.payment,
            History.returned,
            History.prepayment,
            History.qty,
            History.start_rent,
            History.end_rent,
            History.created_at,
            History.updated_at,
            Vehicle.name.label("vehicle_name"),
            Vehicle.category_id,
            Vehicle.image,
        )
        .join(Vehicle, History.vehicle_id == Vehicle.id)
        .where(*_filter_conditions(filters))
        .order_by(*_ordering(filters))
        .offset(_offset(limit, page))
        .limit(limit)
    )
    result = await db.execute(query)
    return [dict(row) for row in result.mappings().all()]


async def get_filtered_histories_count(db: AsyncSession, filters: Mapping[str, Any]) -> int:
    result = await db.execute(
        select(func.count(History.id))
        .select_from(History)
        .join(Vehicle, History.vehicle_id == Vehicle.id)
        .where(*_filter_conditions(filters))
    )
    return result.scalar_one()
