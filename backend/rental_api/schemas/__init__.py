from rental_api.schemas.history import HistorySummary, HistoryResponse, HistoryDetail
from rental_api.schemas.response import PageInfo, Envelope

__all__ = [
    "HistorySummary", "HistoryResponse", "HistoryDetail",
    "PageInfo", "Envelope",
]
