# app/models/guard.py
"""
Staff accounts: gate guards and administrators.
Guards are assigned a gate number (1-15); admins have none.
"""

from sqlalchemy import Column, Integer, String, DateTime
from app.database import Base
from app.utils.clock import utc_now

ROLE_ADMIN = "admin"
ROLE_GUARD = "guard"


class Guard(Base):
    __tablename__ = "guards"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(200), unique=True, nullable=False, index=True)   # stored lower-cased
    password_hash = Column(String(255), nullable=False)
    role = Column(String(10), nullable=False, default=ROLE_GUARD)          # admin | guard
    full_name = Column(String(200), nullable=False)
    gate = Column(Integer)
    location_name = Column(String(200))
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    def __repr__(self):
        return f"<Guard {self.email} role={self.role} gate={self.gate}>"
