"""
db/models/borrow_record.py

Loan of one book title to one student.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class ReturnStatus:
    RETURNED = "Returned"
    NOT_RETURNED = "Not Returned"
    OVERDUE = "Overdue"


RETURN_STATUSES: tuple[str, ...] = (
    ReturnStatus.RETURNED,
    ReturnStatus.NOT_RETURNED,
    ReturnStatus.OVERDUE,
)


class BorrowRecord(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """
    A borrow record.

    student_email / student_phone are optional contact points used by the
    overdue sweep; a record without either is still flipped to Overdue.
    """

    __tablename__ = "borrow_records"

    student_name: Mapped[str] = mapped_column(String(255), nullable=False)
    student_id: Mapped[str] = mapped_column(String(64), nullable=False)
    book_title: Mapped[str] = mapped_column(String(255), nullable=False)
    borrow_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    return_status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=ReturnStatus.NOT_RETURNED,
        comment="Returned, Not Returned, Overdue",
    )
    student_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    student_phone: Mapped[str | None] = mapped_column(String(32), nullable=True)

    __table_args__ = (
        Index("ix_borrow_records_due_date", "due_date"),
        Index("ix_borrow_records_return_status", "return_status"),
        Index("ix_borrow_records_student_id", "student_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<BorrowRecord id={self.id} student_id={self.student_id!r} "
            f"book_title={self.book_title!r} return_status={self.return_status!r}>"
        )
