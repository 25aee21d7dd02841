"""
History (booking) endpoints.

Path ids and query parameters are taken as raw strings and validated by the
service, so malformed input comes back as a 400 envelope rather than a
framework-level 422.
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from rental_api.api.deps import get_paginator
from rental_api.api.errors import guarded
from rental_api.core.config import Settings, get_settings
from rental_api.db.session import get_db
from rental_api.helpers.pagination import Paginator
from rental_api.helpers.response import returning_success
from rental_api.schemas.history import HistoryResponse
from rental_api.services import history_service

router = APIRouter(prefix="/histories", tags=["Histories"])


@router.get("")
@guarded("list", "Failed to get list of history")
async def list_histories(
    request: Request,
    db: AsyncSession = Depends(get_db),
    paginator: Paginator = Depends(get_paginator),
    settings: Settings = Depends(get_settings),
):
    """List a user's histories, newest first. Requires `user_id`."""
    page = await history_service.list_histories(
        db, request.query_params, paginator, settings.DEFAULT_PAGE_LIMIT
    )
    return returning_success(status.HTTP_200_OK, "Success getting histories", page.results, page.page_info)


@router.post("")
@guarded("create", "Failed to add history")
async def add_history(
    payload: Optional[dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
):
    """
    Book a vehicle.

    Checks the rent window (1-30 days, not in the past), stock, and that
    exactly one of full payment or a prepayment of at least half the price
    is supplied.
    """
    history = await history_service.add_history(db, payload)
    return returning_success(
        status.HTTP_201_CREATED,
        "History has been added",
        HistoryResponse.model_validate(history),
    )


@router.get("/filter")
@guarded("filter", "Failed to get filtered histories")
async def get_filtered_histories(
    request: Request,
    db: AsyncSession = Depends(get_db),
    paginator: Paginator = Depends(get_paginator),
    settings: Settings = Depends(get_settings),
):
    """Filter a user's histories by category and vehicle name, with optional sorting."""
    page = await history_service.get_filtered_histories(
        db, request.query_params, paginator, settings.APP_URL, settings.DEFAULT_PAGE_LIMIT
    )
    return returning_success(status.HTTP_200_OK, "Success getting histories", page.results, page.page_info)


@router.get("/{history_id}")
@guarded("get", "Failed to get history")
async def get_history(history_id: str, db: AsyncSession = Depends(get_db)):
    history = await history_service.get_history(db, history_id)
    return returning_success(
        status.HTTP_200_OK,
        "Success getting history",
        HistoryResponse.model_validate(history),
    )


@router.put("/{history_id}")
@guarded("update", "Failed to update history")
async def update_history(
    history_id: str,
    payload: Optional[dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
):
    """Update `payment`, `returned` and/or `prepayment`."""
    history = await history_service.update_history(db, history_id, payload)
    return returning_success(
        status.HTTP_200_OK,
        "History has been updated",
        HistoryResponse.model_validate(history),
    )


@router.delete("/{history_id}")
@guarded("delete", "Failed to delete history")
async def delete_history(history_id: str, db: AsyncSession = Depends(get_db)):
    snapshot = await history_service.delete_history(db, history_id)
    return returning_success(status.HTTP_200_OK, "History has been deleted", snapshot)
