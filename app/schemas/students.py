"""
app/schemas/students.py

Request and response schemas for student endpoints.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import Field

from app.schemas.base import CamelModel


class StudentCreateRequest(CamelModel):
    roll_no: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    department: str = Field(..., min_length=1)
    year_of_study: int = Field(..., ge=1)
    admission_year: int = Field(..., ge=1900)
    email: str = Field(..., min_length=3)


class StudentUpdateRequest(CamelModel):
    roll_no: str | None = Field(default=None, min_length=1)
    name: str | None = Field(default=None, min_length=1)
    department: str | None = Field(default=None, min_length=1)
    year_of_study: int | None = Field(default=None, ge=1)
    admission_year: int | None = Field(default=None, ge=1900)
    email: str | None = Field(default=None, min_length=3)


class StudentResponse(CamelModel):
    id: uuid.UUID = Field(..., alias="_id")
    roll_no: str
    name: str
    department: str
    year_of_study: int
    admission_year: int
    email: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
