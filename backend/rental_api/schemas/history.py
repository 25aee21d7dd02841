"""
Pydantic schemas for history (booking) responses.

Request bodies are mapped through the rule validator in
`rental_api.helpers.validation` instead of request models, so that bad input
is reported as a 400 envelope naming the offending field.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel


class HistorySummary(BaseModel):
    """Row shape of the per-user listing."""

    id: int
    user_id: int
    vehicle_id: int
    payment_code: str
    payment: bool
    returned: bool
    prepayment: int

    model_config = {"from_attributes": True}


class HistoryResponse(HistorySummary):
    qty: int
    start_rent: date
    end_rent: date
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class HistoryDetail(HistoryResponse):
    """History joined with its vehicle, as returned by the filtered listing."""

    vehicle_name: str
    category_id: int
    image: Optional[str] = None
