"""
db/models/student.py

Student model. Students are addressed by their roll number.
"""

from __future__ import annotations

from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Student(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "students"

    roll_no: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    department: Mapped[str] = mapped_column(String(120), nullable=False)
    year_of_study: Mapped[int] = mapped_column(Integer, nullable=False)
    admission_year: Mapped[int] = mapped_column(Integer, nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)

    __table_args__ = (Index("ix_students_department", "department"),)

    def __repr__(self) -> str:
        return f"<Student roll_no={self.roll_no!r} name={self.name!r}>"
