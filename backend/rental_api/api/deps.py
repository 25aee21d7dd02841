"""
Shared FastAPI dependencies.
"""

from fastapi import Depends

from rental_api.core.config import Settings, get_settings
from rental_api.helpers.pagination import Paginator


def get_paginator(settings: Settings = Depends(get_settings)) -> Paginator:
    return Paginator(settings.BASE_URL)
