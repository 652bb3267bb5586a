"""
app/api/routers/borrow_records.py

Borrow record endpoints.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.dependencies import require_api_key
from app.repositories.borrow_record_repository import BorrowRecordRepository
from app.schemas.base import BulkDeleteRequest, MessageResponse
from app.schemas.borrow_records import (
    BorrowRecordCreateRequest,
    BorrowRecordPageResponse,
    BorrowRecordResponse,
    BorrowRecordUpdateRequest,
)
from app.services.overdue_service import display_status
from db.models.borrow_record import BorrowRecord
from db.session import get_db

router = APIRouter(prefix="/api/borrowed", tags=["borrowed"], dependencies=[Depends(require_api_key)])


def _to_response(record: BorrowRecord, now: datetime | None = None) -> BorrowRecordResponse:
    return BorrowRecordResponse(
        id=record.id,
        student_name=record.student_name,
        student_id=record.student_id,
        book_title=record.book_title,
        borrow_date=record.borrow_date,
        due_date=record.due_date,
        return_status=display_status(record, now) if now is not None else record.return_status,
        student_email=record.student_email,
        student_phone=record.student_phone,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def _get_record_or_404(repository: BorrowRecordRepository, record_id: uuid.UUID) -> BorrowRecord:
    record = repository.get(record_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Record not found")
    return record


@router.get("", response_model=BorrowRecordPageResponse)
def list_borrow_records(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=500),
    status_filter: str | None = Query(default=None, alias="status"),
    search: str | None = Query(default=None),
    sort: str | None = Query(default=None, description="field:asc|desc, e.g. dueDate:desc"),
    db: Session = Depends(get_db),
) -> BorrowRecordPageResponse:
    """
    Page through borrow records.

    Past-due records that are not returned are shown as Overdue even if the
    sweep has not written that status yet.
    """
    result = BorrowRecordRepository(db).search(
        page=page,
        limit=limit,
        status=status_filter,
        search=search,
        sort=sort,
    )
    now = datetime.now(tz=timezone.utc)
    return BorrowRecordPageResponse(
        total=result.total,
        page=page,
        limit=limit,
        records=[_to_response(record, now) for record in result.records],
    )


@router.post("", response_model=BorrowRecordResponse, status_code=status.HTTP_201_CREATED)
def create_borrow_record(
    body: BorrowRecordCreateRequest,
    db: Session = Depends(get_db),
) -> BorrowRecordResponse:
    record = BorrowRecord(**body.model_dump())
    db.add(record)
    db.commit()
    db.refresh(record)
    return _to_response(record)


@router.put("/{record_id}", response_model=BorrowRecordResponse)
def update_borrow_record(
    record_id: uuid.UUID,
    body: BorrowRecordUpdateRequest,
    db: Session = Depends(get_db),
) -> BorrowRecordResponse:
    record = _get_record_or_404(BorrowRecordRepository(db), record_id)
    for field_name, value in body.model_dump(exclude_unset=True).items():
        setattr(record, field_name, value)
    db.commit()
    db.refresh(record)
    return _to_response(record)


@router.delete("/{record_id}", response_model=MessageResponse)
def delete_borrow_record(record_id: uuid.UUID, db: Session = Depends(get_db)) -> MessageResponse:
    record = _get_record_or_404(BorrowRecordRepository(db), record_id)
    db.delete(record)
    db.commit()
    return MessageResponse(message="Record deleted successfully")


@router.post("/bulk-delete", response_model=MessageResponse)
def bulk_delete_borrow_records(
    body: BulkDeleteRequest,
    db: Session = Depends(get_db),
) -> MessageResponse:
    BorrowRecordRepository(db).delete_many(body.ids)
    db.commit()
    return MessageResponse(message="Records deleted")
