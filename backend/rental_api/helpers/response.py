"""
Uniform response envelope: {"success", "message", "results"?, "pageInfo"?}.
"""

from typing import Any, Iterable, Optional

from fastapi.responses import JSONResponse

from rental_api.schemas.history import HistoryDetail
from rental_api.schemas.response import Envelope, PageInfo


def returning_error(status_code: int, message: str) -> JSONResponse:
    envelope = Envelope(success=False, message=message)
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(mode="json", include={"success", "message"}),
    )


def returning_success(
    status_code: int,
    message: str,
    results: Any,
    page_info: Optional[PageInfo] = None,
) -> JSONResponse:
    envelope = Envelope(success=True, message=message, results=results, pageInfo=page_info)
    exclude = {"pageInfo"} if page_info is None else set()
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(mode="json", exclude=exclude),
    )


def data_mapping(rows: Iterable[HistoryDetail], app_url: str) -> list[HistoryDetail]:
    """Turn stored relative image paths into absolute URLs."""
    base = app_url.rstrip("/")
    return [
        row.model_copy(update={"image": f"{base}/{row.image}" if row.image else None})
        for row in rows
    ]
