"""
Pydantic schemas for the response envelope.
"""

from typing import Any, Optional

from pydantic import BaseModel


class PageInfo(BaseModel):
    totalPages: int
    currentPage: int
    nextPage: Optional[str] = None
    prevPage: Optional[str] = None
    lastPages: int


class Envelope(BaseModel):
    success: bool
    message: str
    pageInfo: Optional[PageInfo] = None
    results: Any = None
