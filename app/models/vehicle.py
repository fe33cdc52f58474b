# app/models/vehicle.py
"""
Registered vehicles table.
Each vehicle belongs to one student and is looked up by plate or by the
owner's matricula. `status` mirrors the type of the latest movement and is
written only by movement_service.record_movement.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base
from app.utils.clock import utc_now

HELMET_VEHICLE_TYPES = ("moto", "bici")
STATUS_INSIDE = "inside"
STATUS_OUTSIDE = "outside"


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    plate = Column(String(20), unique=True, nullable=False, index=True)   # LLL-NNNN
    vehicle_type = Column(String(20), nullable=False, default="moto")
    has_helmet = Column(Boolean, nullable=False, default=False)
    helmet_count = Column(Integer, nullable=False, default=0)
    vehicle_description = Column(Text)
    vehicle_photo_path = Column(String(500))   # opaque storage reference, never a filesystem path
    status = Column(String(10), nullable=False, default=STATUS_OUTSIDE)     # inside | outside
    created_at = Column(DateTime, nullable=False, default=utc_now, index=True)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    student = relationship("Student", back_populates="vehicles", lazy="joined")
    helmets = relationship("Helmet", back_populates="vehicle", order_by="Helmet.sort_order",
                           cascade="all, delete-orphan")
    movements = relationship("Movement", back_populates="vehicle",
                             cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Vehicle {self.plate} type={self.vehicle_type} status={self.status}>"
