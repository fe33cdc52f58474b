# app/models/helmet.py
"""Helmets registered with a motorcycle or bicycle. Deleted with their vehicle."""

from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base


class Helmet(Base):
    __tablename__ = "helmets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(String(255), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)

    vehicle = relationship("Vehicle", back_populates="helmets")

    def __repr__(self):
        return f"<Helmet {self.id} vehicle={self.vehicle_id} order={self.sort_order}>"
