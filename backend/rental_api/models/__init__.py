from rental_api.models.user import User
from rental_api.models.category import Category
from rental_api.models.vehicle import Vehicle
from rental_api.models.history import History

__all__ = ["User", "Category", "Vehicle", "History"]
