# app/schemas/lookup.py
from pydantic import BaseModel
from typing import Literal, Optional
from app.schemas.vehicle import VehicleOut


class IdentifierIn(BaseModel):
    value: str = ""


class ValidationOut(BaseModel):
    valid: bool
    normalized: str
    reason: Optional[str] = None
    message: Optional[str] = None


class FormattedOut(BaseModel):
    formatted: str


class QrScanIn(BaseModel):
    raw: str


class QrResolveOut(BaseModel):
    search_term: str
    action: Optional[Literal["entry", "exit"]] = None
    decoded: bool                       # False when the raw text was used as-is
    vehicle: Optional[VehicleOut] = None
