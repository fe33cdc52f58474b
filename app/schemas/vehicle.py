# app/schemas/vehicle.py
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Literal, Optional


class HelmetIn(BaseModel):
    description: str = ""


class VehicleIn(BaseModel):
    plate: str = Field(min_length=1)
    student_id: str = Field(min_length=1)       # matricula
    student_name: str = Field(min_length=1)
    vehicle_type: Literal["moto", "carro", "bici"] = "moto"
    has_helmet: bool = False
    helmet_count: int = Field(default=0, ge=0, le=10)
    helmets: list[HelmetIn] = []
    vehicle_description: Optional[str] = None
    vehicle_photo_path: Optional[str] = None

    @field_validator("vehicle_photo_path")
    @classmethod
    def photo_path_is_opaque(cls, value: Optional[str]) -> Optional[str]:
        """Photo references are storage keys; absolute or parent-relative paths are rejected."""
        if value is None or not value.strip():
            return None
        value = value.strip()
        if value.startswith(("/", "\\")) or ".." in value or ":" in value.split("/")[0]:
            raise ValueError("vehicle_photo_path must be a relative storage reference")
        return value


class VehicleOut(BaseModel):
    id: int
    plate: str
    student_user_id: int
    student_id: str              # matricula
    student_name: str
    vehicle_type: str
    has_helmet: bool
    helmet_count: int
    helmets: list[str]
    vehicle_description: str
    vehicle_photo_url: Optional[str]
    status: str                  # inside | outside
    created_at: Optional[datetime]

    @classmethod
    def from_vehicle(cls, vehicle) -> "VehicleOut":
        return cls(
            id=vehicle.id,
            plate=vehicle.plate,
            student_user_id=vehicle.student.id,
            student_id=vehicle.student.matricula,
            student_name=vehicle.student.full_name,
            vehicle_type=vehicle.vehicle_type,
            has_helmet=bool(vehicle.has_helmet),
            helmet_count=vehicle.helmet_count,
            helmets=[h.description for h in vehicle.helmets],
            vehicle_description=vehicle.vehicle_description or "",
            vehicle_photo_url=vehicle.vehicle_photo_path,
            status=vehicle.status,
            created_at=vehicle.created_at,
        )
