"""
Vehicle model with stock tracking.

Key design decisions:
- `qty` is the total stock; the booked count is derived from unreturned
  histories at read time instead of being stored
- `prepayment` flags whether the vehicle can be reserved with a partial payment
"""

from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from rental_api.db.base import Base, TimestampMixin


class Vehicle(Base, TimestampMixin):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    image = Column(String(255), nullable=True)
    price = Column(Integer, nullable=False)
    qty = Column(Integer, nullable=False, default=1)
    prepayment = Column(Boolean, nullable=False, default=False)

    category = relationship("Category", back_populates="vehicles")
    histories = relationship("History", back_populates="vehicle")

    __table_args__ = (
        CheckConstraint("price > 0", name="check_vehicle_price_positive"),
        CheckConstraint("qty >= 0", name="check_vehicle_qty_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Vehicle(id={self.id}, name={self.name}, qty={self.qty})>"
