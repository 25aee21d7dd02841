"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter

from rental_api.api.routes import histories
from rental_api.core.config import get_settings

api_router = APIRouter(prefix=get_settings().API_PREFIX)
api_router.include_router(histories.router)
