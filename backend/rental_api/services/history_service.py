"""
History (booking) service: the rental use-cases behind /histories.

Each function runs one request's pipeline: map and validate input, check
that the referenced user/vehicle/category exist, apply the booking rules,
then issue a single persistence call.

AVAILABILITY STRATEGY: Row lock on the vehicle
==============================================

Problem:
  Two renters ask for the last unit of a vehicle at the same time.
  Both read booked=4 of qty=5, both insert, the vehicle ends up
  booked 6 of 5.

Solution:
  The create pipeline locks the vehicle row with SELECT ... FOR UPDATE,
  then sums the unreturned quantity in a second statement and inserts the
  history in the same transaction. The second request blocks on the row
  until the first commits; its booked sum runs after the lock is granted,
  so it counts the first request's history.

  Databases without row locks (SQLite) ignore the clause; there the
  check-then-insert window remains.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from rental_api.core.exceptions import NotFoundError, PersistenceFailure, ValidationError
from rental_api.core.logging import get_logger
from rental_api.core.metrics import record_booking_rejection
from rental_api.helpers.pagination import Paginator
from rental_api.helpers.payment import generate_payment_code
from rental_api.helpers.response import data_mapping
from rental_api.helpers.validation import (
    request_mapping,
    to_positive_int,
    validate_date_window,
    validate_id,
)
from rental_api.models.history import History
from rental_api.repositories import histories as histories_repo
from rental_api.repositories import lookups
from rental_api.schemas.history import HistoryDetail, HistoryResponse, HistorySummary
from rental_api.schemas.response import PageInfo

logger = get_logger(__name__)

DEFAULT_LIMIT = 5
MIN_RENT_DAYS = 1
MAX_RENT_DAYS = 30
MIN_PREPAYMENT_PERCENT = 50

CREATE_RULES = {
    "user_id": "number|required",
    "vehicle_id": "number|required",
    "payment": "boolean|required",
    "returned": "boolean|required",
    "prepayment": "number|required",
    "qty": "number|required",
    "start_rent": "date|required",
    "end_rent": "date|required",
}

UPDATE_RULES = {
    "payment": "boolean",
    "returned": "boolean",
    "prepayment": "number",
}

FILTER_RULES = {
    "user_id": "number",
    "category_id": "number",
    "vehicle_name": "string",
    "sort_date": "sorter",
    "sort_name": "sorter",
    "sort_returned": "sorter",
    "sort_payment": "sorter",
}


@dataclass
class Page:
    results: list
    page_info: PageInfo


def _today() -> date:
    return datetime.now(timezone.utc).date()


def _reject(reason: str, message: str, **context: Any) -> ValidationError:
    logger.warning("history_rejected", reason=reason, **context)
    record_booking_rejection(reason)
    return ValidationError(message)


def _paging(params: Mapping[str, Any], default_limit: int) -> dict[str, int]:
    return {
        "limit": to_positive_int(params.get("limit")) or default_limit,
        "page": to_positive_int(params.get("page")) or 1,
    }


def _parse_history_id(history_id: Any) -> int:
    if not validate_id(history_id):
        raise ValidationError("Id must be a number")
    return to_positive_int(history_id)


def minimum_prepayment(price: int) -> int:
    """Half the price, rounded half up."""
    return math.floor(price * MIN_PREPAYMENT_PERCENT / 100 + 0.5)


def check_rent_window(start_rent: Any, end_rent: Any, today: Optional[date] = None) -> tuple[date, date]:
    results = validate_date_window(start_rent, end_rent)
    if not all(result.status for result in results.values()):
        raise _reject("invalid_date", "Booking date not valid")

    start, end = results["start"].value, results["end"].value
    today = today or _today()

    if (start - today).days < 0:
        raise _reject(
            "start_in_past",
            "Booking date must be today or greater than today",
            start_rent=start.isoformat(),
        )

    span = (end - start).days
    if span < MIN_RENT_DAYS or span > MAX_RENT_DAYS:
        raise _reject(
            "rent_span",
            f"Booking date must be between {MIN_RENT_DAYS} - {MAX_RENT_DAYS} days",
            days=span,
        )
    return start, end


def check_payment(data: Mapping[str, Any], vehicle: lookups.VehicleStock) -> None:
    payment = bool(data["payment"])
    prepayment = data["prepayment"]

    if prepayment < 0:
        raise _reject("negative_prepayment", "Prepayment must not be negative")

    if prepayment > 0:
        if payment:
            raise _reject("payment_and_prepayment", "You can not pay and prepay too")

        if prepayment >= vehicle.price:
            raise _reject(
                "prepayment_too_high",
                "Prepayment must be less than vehicle price",
                vehicle_id=vehicle.id,
            )

        if not vehicle.prepayment:
            raise _reject(
                "prepayment_unsupported",
                "This vehicle is not available for pre-payment",
                vehicle_id=vehicle.id,
            )

        min_price = minimum_prepayment(vehicle.price)
        if prepayment < min_price:
            raise _reject(
                "prepayment_too_low",
                f"Pre-payment must be at least {min_price}",
                vehicle_id=vehicle.id,
                minimum=min_price,
            )

    if not payment and prepayment <= 0:
        raise _reject("unpaid", "You must pay or prepay")


async def list_histories(
    db: AsyncSession,
    params: Mapping[str, Any],
    paginator: Paginator,
    default_limit: int = DEFAULT_LIMIT,
) -> Page:
    user_id = to_positive_int(params.get("user_id"))
    if user_id is None:
        raise ValidationError("user_id must be a number")

    paging = _paging(params, default_limit)
    rows = await histories_repo.get_histories(db, user_id, paging["limit"], paging["page"])
    total = await histories_repo.count_histories(db, user_id)

    page_info = paginator.page_info(total, "histories", {**paging, "user_id": user_id})
    return Page(
        results=[HistorySummary.model_validate(row) for row in rows],
        page_info=page_info,
    )


async def add_history(db: AsyncSession, payload: Optional[Mapping[str, Any]]) -> History:
    """
    Create a booking.

    Validation order matters for the error a client sees: input shape,
    dates, user, vehicle, quantity and stock, then payment.
    """
    data = request_mapping(payload, CREATE_RULES)
    data["start_rent"], data["end_rent"] = check_rent_window(data["start_rent"], data["end_rent"])

    user = await lookups.get_user(db, data["user_id"])
    if user is None:
        raise NotFoundError("User not found")

    vehicle = await lookups.get_vehicle(db, data["vehicle_id"], lock=True)
    if vehicle is None:
        raise NotFoundError("Vehicle not found")

    if data["qty"] < 1:
        raise _reject("invalid_qty", "Qty must be greater than 0")

    available = vehicle.available
    if available < 1:
        raise _reject("fully_booked", "This vehicle is fully booked", vehicle_id=vehicle.id)

    if data["qty"] > available:
        raise _reject(
            "insufficient_stock",
            f"Now, you can only book up to a maximum of {available} vehicles",
            vehicle_id=vehicle.id,
            requested=data["qty"],
            available=available,
        )

    check_payment(data, vehicle)

    data["payment_code"] = generate_payment_code(vehicle.name)
    result = await histories_repo.add_history(db, data)

    if result.affected_rows < 1:
        raise PersistenceFailure("Can't add history")

    history = await histories_repo.get_history(db, result.insert_id)
    logger.info(
        "history_created",
        history_id=result.insert_id,
        user_id=data["user_id"],
        vehicle_id=data["vehicle_id"],
        qty=data["qty"],
        payment_code=data["payment_code"],
    )
    return history


async def get_history(db: AsyncSession, history_id: Any) -> History:
    history = await histories_repo.get_history(db, _parse_history_id(history_id))
    if history is None:
        raise NotFoundError("History not found")
    return history


async def update_history(
    db: AsyncSession,
    history_id: Any,
    payload: Optional[Mapping[str, Any]],
) -> History:
    data = request_mapping(payload, UPDATE_RULES)
    if not data:
        raise ValidationError("Data not validated")
    if data.get("prepayment", 0) < 0:
        raise ValidationError("Prepayment must not be negative")

    history = await get_history(db, history_id)

    result = await histories_repo.update_history(db, history.id, data)
    if result.affected_rows < 1:
        raise PersistenceFailure("Can't update history")

    logger.info("history_updated", history_id=history.id, fields=sorted(data))
    return await histories_repo.get_history(db, history.id)


async def delete_history(db: AsyncSession, history_id: Any) -> HistoryResponse:
    """Delete a history and return the row as it was before deletion."""
    history = await get_history(db, history_id)
    snapshot = HistoryResponse.model_validate(history)

    result = await histories_repo.delete_history(db, snapshot.id)
    if result.affected_rows < 1:
        raise PersistenceFailure("Can't delete history")

    logger.info("history_deleted", history_id=snapshot.id)
    return snapshot


async def get_filtered_histories(
    db: AsyncSession,
    params: Mapping[str, Any],
    paginator: Paginator,
    app_url: str,
    default_limit: int = DEFAULT_LIMIT,
) -> Page:
    data = request_mapping(params, FILTER_RULES)
    paging = _paging(params, default_limit)

    user = await lookups.get_user(db, data.get("user_id"))
    if user is None:
        raise NotFoundError("User not found")

    category_id = data.get("category_id")
    if category_id is not None:
        if not validate_id(category_id):
            raise ValidationError("Category id must be a number")
        if await lookups.get_category(db, category_id) is None:
            raise NotFoundError("Category not found")

    rows = await histories_repo.get_filtered_histories(db, data, paging["limit"], paging["page"])
    total = await histories_repo.get_filtered_histories_count(db, data)

    results = data_mapping([HistoryDetail.model_validate(row) for row in rows], app_url)
    page_info = paginator.page_info(total, "histories/filter", {**data, **paging})
    return Page(results=results, page_info=page_info)
