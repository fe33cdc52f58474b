# app/models/movement.py
"""
Movements table: append-only audit trail of gate crossings.
One row per guard action (entry | exit). Rows are never updated;
the vehicle's cached status is written in the same transaction.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base
from app.utils.clock import utc_now

MOVEMENT_ENTRY = "entry"
MOVEMENT_EXIT = "exit"


class Movement(Base):
    __tablename__ = "movements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    guard_id = Column(Integer, ForeignKey("guards.id", ondelete="SET NULL"), index=True)   # null if unattributed
    type = Column(String(10), nullable=False)      # entry | exit
    created_at = Column(DateTime, nullable=False, default=utc_now, index=True)

    vehicle = relationship("Vehicle", back_populates="movements")
    guard = relationship("Guard")

    def __repr__(self):
        return f"<Movement {self.id} vehicle={self.vehicle_id} type={self.type}>"
