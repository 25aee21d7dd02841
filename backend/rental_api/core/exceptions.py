"""
Application error taxonomy.

Services raise these; the API layer renders them as the standard
`{"success": false, "message": ...}` envelope with the matching status code.
"""

from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Malformed or missing input, or a business rule violation."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class PersistenceFailure(AppError):
    """A write affected no rows, or the data layer failed unexpectedly."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
