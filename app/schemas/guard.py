# app/schemas/guard.py
from pydantic import BaseModel, Field
from typing import Optional


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class GuardCreate(BaseModel):
    email: str = Field(min_length=3)
    password: str = Field(min_length=8)
    full_name: str = Field(min_length=1)
    gate: Optional[int] = None          # clamped to 1..15
    location_name: Optional[str] = None


class GuardUpdate(BaseModel):
    email: str = Field(min_length=3)
    full_name: str = Field(min_length=1)
    gate: Optional[int] = None
    location_name: Optional[str] = None


class GuardOut(BaseModel):
    id: int
    email: str
    role: str
    full_name: str
    gate: Optional[int]
    location_name: Optional[str]

    class Config:
        from_attributes = True


class SessionUser(BaseModel):
    id: int
    email: str
    role: str                # admin | guard
    full_name: str
    gate: Optional[int] = None
