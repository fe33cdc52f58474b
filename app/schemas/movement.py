# app/schemas/movement.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Literal, Optional


class MovementCreate(BaseModel):
    vehicle_id: int = Field(gt=0)
    type: Literal["entry", "exit"]


class MovementResultOut(BaseModel):
    movement_id: int
    new_status: str


class MovementOut(BaseModel):
    id: int
    vehicle_id: int
    guard_id: Optional[int]
    type: str
    created_at: datetime

    class Config:
        from_attributes = True


class GuardMovementOut(BaseModel):
    id: int
    vehicle_id: int
    plate: str
    type: str
    created_at: datetime
