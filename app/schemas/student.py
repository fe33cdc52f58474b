# app/schemas/student.py
from pydantic import BaseModel, Field
from typing import Optional


class StudentUpdate(BaseModel):
    full_name: str = Field(min_length=1)
    student_id: str = Field(min_length=1)   # matricula


class StudentOut(BaseModel):
    id: int
    student_id: str
    full_name: str
    email: Optional[str]
