"""
Existence lookups for the entities a history refers to.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rental_api.models.category import Category
from rental_api.models.history import History
from rental_api.models.user import User
from rental_api.models.vehicle import Vehicle


@dataclass(frozen=True)
class VehicleStock:
    id: int
    name: str
    price: int
    qty: int
    booked: int
    prepayment: bool

    @property
    def available(self) -> int:
        return self.qty - self.booked


def _booked_query(vehicle_id: int):
    return select(func.coalesce(func.sum(History.qty), 0)).where(
        History.vehicle_id == vehicle_id,
        History.returned.is_(False),
    )


async def get_user(db: AsyncSession, user_id: Optional[int]) -> Optional[User]:
    if user_id is None:
        return None
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_category(db: AsyncSession, category_id: int) -> Optional[Category]:
    result = await db.execute(select(Category).where(Category.id == category_id))
    return result.scalar_one_or_none()


async def get_vehicle(
    db: AsyncSession,
    vehicle_id: int,
    lock: bool = False,
) -> Optional[VehicleStock]:
    """
    Load a vehicle with its currently booked quantity.

    With lock=True the vehicle row is held FOR UPDATE until the caller's
    transaction ends. The booked sum is a separate statement issued after
    the lock is granted: under READ COMMITTED each statement takes a fresh
    snapshot, so it sees every history committed by the previous lock holder.
    """
    query = select(Vehicle).where(Vehicle.id == vehicle_id)
    if lock:
        query = query.with_for_update().execution_options(populate_existing=True)

    vehicle = (await db.execute(query)).scalar_one_or_none()
    if vehicle is None:
        return None

    booked = (await db.execute(_booked_query(vehicle.id))).scalar_one()
    return VehicleStock(
        id=vehicle.id,
        name=vehicle.name,
        price=vehicle.price,
        qty=vehicle.qty,
        booked=int(booked or 0),
        prepayment=bool(vehicle.prepayment),
    )
