"""
app/schemas/borrow_records.py

Request and response schemas for borrow record endpoints.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import Field

from app.schemas.base import CamelModel

ReturnStatusLiteral = Literal["Returned", "Not Returned", "Overdue"]


class BorrowRecordCreateRequest(CamelModel):
    student_name: str = Field(..., min_length=1)
    student_id: str = Field(..., min_length=1)
    book_title: str = Field(..., min_length=1)
    borrow_date: datetime
    due_date: datetime
    return_status: ReturnStatusLiteral = "Not Returned"
    student_email: str | None = None
    student_phone: str | None = None


class BorrowRecordUpdateRequest(CamelModel):
    student_name: str | None = Field(default=None, min_length=1)
    student_id: str | None = Field(default=None, min_length=1)
    book_title: str | None = Field(default=None, min_length=1)
    borrow_date: datetime | None = None
    due_date: datetime | None = None
    return_status: ReturnStatusLiteral | None = None
    student_email: str | None = None
    student_phone: str | None = None


class BorrowRecordResponse(CamelModel):
    id: uuid.UUID = Field(..., alias="_id")
    student_name: str
    student_id: str
    book_title: str
    borrow_date: datetime
    due_date: datetime
    return_status: str
    student_email: str | None = None
    student_phone: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class BorrowRecordPageResponse(CamelModel):
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    records: list[BorrowRecordResponse] = Field(default_factory=list)
