"""
Data-access layer. Repositories wrap SQLAlchemy statements and hand back
ORM rows, plain mappings or WriteResult counts; business rules live in
rental_api.services.
"""

from rental_api.repositories.results import WriteResult

__all__ = ["WriteResult"]
