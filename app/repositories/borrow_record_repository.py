"""
app/repositories/borrow_record_repository.py

Query helpers for borrow records.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy import delete, func, or_, select
from sqlalchemy.orm import Session

from db.models.borrow_record import BorrowRecord

SORTABLE_FIELDS: dict[str, Any] = {
    "studentName": BorrowRecord.student_name,
    "studentId": BorrowRecord.student_id,
    "bookTitle": BorrowRecord.book_title,
    "borrowDate": BorrowRecord.borrow_date,
    "dueDate": BorrowRecord.due_date,
    "returnStatus": BorrowRecord.return_status,
    "createdAt": BorrowRecord.created_at,
}
DEFAULT_SORT_FIELD = "dueDate"


@dataclass(frozen=True)
class BorrowRecordPage:
    total: int
    records: list[BorrowRecord]


class BorrowRecordRepository:
    """
    Repository for listing, paging and bulk-removing borrow records.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_all(self) -> list[BorrowRecord]:
        stmt = select(BorrowRecord).order_by(BorrowRecord.due_date)
        return list(self._session.execute(stmt).scalars().all())

    def get(self, record_id: uuid.UUID) -> BorrowRecord | None:
        return self._session.get(BorrowRecord, record_id)

    def search(
        self,
        *,
        page: int,
        limit: int,
        status: str | None = None,
        search: str | None = None,
        sort: str | None = None,
    ) -> BorrowRecordPage:
        """
        Filter, sort and page borrow records.

        ``search`` is a case-insensitive substring match over student name,
        student id and book title. ``sort`` has the form ``field:asc|desc``
        with camelCase field names; unknown fields fall back to dueDate.
        """

        filters = []
        if status:
            filters.append(BorrowRecord.return_status == status)
        if search:
            pattern = f"%{search.strip()}%"
            filters.append(
                or_(
                    BorrowRecord.student_name.ilike(pattern),
                    BorrowRecord.student_id.ilike(pattern),
                    BorrowRecord.book_title.ilike(pattern),
                )
            )

        count_stmt = select(func.count()).select_from(BorrowRecord).where(*filters)
        total = int(self._session.execute(count_stmt).scalar_one())

        column, descending = _parse_sort(sort)
        stmt = (
            select(BorrowRecord)
            .where(*filters)
            .order_by(column.desc() if descending else column.asc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        records = list(self._session.execute(stmt).scalars().all())
        return BorrowRecordPage(total=total, records=records)

    def delete_many(self, record_ids: Sequence[uuid.UUID]) -> int:
        if not record_ids:
            return 0
        result = self._session.execute(
            delete(BorrowRecord).where(BorrowRecord.id.in_(list(record_ids)))
        )
        return result.rowcount or 0


def _parse_sort(sort: str | None) -> tuple[Any, bool]:
    if not sort:
        return SORTABLE_FIELDS[DEFAULT_SORT_FIELD], False
    field_name, _, order = sort.partition(":")
    column = SORTABLE_FIELDS.get(field_name.strip(), SORTABLE_FIELDS[DEFAULT_SORT_FIELD])
    return column, order.strip().lower() == "desc"
