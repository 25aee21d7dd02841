"""
History model: one rental transaction linking a user and a vehicle
for a date range.

Key design decisions:
- `payment_code` is unique so a generator collision fails the insert
  instead of producing two bookings with the same code
- `prepayment` stores the partial amount paid, 0 when paid in full
- unreturned rows count against the vehicle's stock
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from rental_api.db.base import Base, TimestampMixin


class History(Base, TimestampMixin):
    __tablename__ = "histories"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    payment_code = Column(String(80), nullable=False)
    payment = Column(Boolean, nullable=False, default=False)
    returned = Column(Boolean, nullable=False, default=False)
    prepayment = Column(Integer, nullable=False, default=0)
    qty = Column(Integer, nullable=False, default=1)
    start_rent = Column(Date, nullable=False)
    end_rent = Column(Date, nullable=False)

    user = relationship("User", back_populates="histories")
    vehicle = relationship("Vehicle", back_populates="histories")

    __table_args__ = (
        UniqueConstraint("payment_code", name="uq_histories_payment_code"),
        CheckConstraint("qty > 0", name="check_history_qty_positive"),
        CheckConstraint("prepayment >= 0", name="check_history_prepayment_non_negative"),
        CheckConstraint("end_rent > start_rent", name="check_history_rent_window"),
        # Stock lookups sum unreturned rows per vehicle
        Index("ix_histories_vehicle_returned", "vehicle_id", "returned"),
    )

    def __repr__(self) -> str:
        return f"<History(id={self.id}, user={self.user_id}, vehicle={self.vehicle_id}, code={self.payment_code})>"
