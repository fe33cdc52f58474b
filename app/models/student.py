# app/models/student.py
"""
Students table.
One row per matricula. Created implicitly the first time a vehicle is
registered for that matricula (find-or-create), edited from the profile screen.
"""

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from app.database import Base
from app.utils.clock import utc_now


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, autoincrement=True)
    matricula = Column(String(9), unique=True, nullable=False, index=True)
    full_name = Column(String(200), nullable=False)
    email = Column(String(200))
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    vehicles = relationship("Vehicle", back_populates="student")

    def __repr__(self):
        return f"<Student {self.matricula} name={self.full_name}>"
