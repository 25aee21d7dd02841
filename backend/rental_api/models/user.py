"""
Renter accounts. The rental core only checks that a user exists.
"""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from rental_api.db.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    fullname = Column(String(100), nullable=True)

    histories = relationship("History", back_populates="user")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
