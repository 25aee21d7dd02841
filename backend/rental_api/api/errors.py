"""
Error rendering and route guarding.

Every error response uses the same envelope as successful ones:
{"success": false, "message": "..."}.
"""

import functools

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from rental_api.core.exceptions import AppError, PersistenceFailure
from rental_api.core.logging import get_logger
from rental_api.core.metrics import record_history_request
from rental_api.helpers.response import returning_error

logger = get_logger(__name__)


def guarded(operation: str, failure_message: str):
    """
    Wrap a route so unexpected exceptions surface as a 500 with a fixed
    message. AppErrors pass through untouched. Outcomes are counted per
    operation.
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                response = await func(*args, **kwargs)
            except AppError as exc:
                outcome = "error" if exc.status_code >= 500 else "rejected"
                record_history_request(operation, outcome)
                raise
            except Exception as exc:
                logger.exception("history_request_failed", operation=operation, error=str(exc))
                record_history_request(operation, "error")
                raise PersistenceFailure(failure_message) from exc

            record_history_request(operation, "success")
            return response

        return wrapper

    return decorator


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("request_error", status_code=exc.status_code, message=exc.message)
    return returning_error(exc.status_code, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info("request_body_invalid", errors=exc.errors())
    return returning_error(status.HTTP_400_BAD_REQUEST, "Invalid request body")


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return returning_error(exc.status_code, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled_exception", error=str(exc))
    return returning_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
