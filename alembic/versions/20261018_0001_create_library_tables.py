"""create books, students and borrow_records tables

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "books",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("author", sa.String(length=255), nullable=False),
        sa.Column("genre", sa.String(length=120), nullable=False),
        sa.Column("published_count", sa.Integer(), nullable=False, comment="Number of published copies"),
        sa.Column("status", sa.String(length=16), nullable=False, comment="Available, Borrowed"),
        sa.Column(
            "height",
            sa.String(length=64),
            nullable=False,
            comment="Free-text shelf height as supplied by the source",
        ),
        sa.Column("publisher", sa.String(length=255), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=False),
        sa.Column("isbn", sa.String(length=32), nullable=True),
        sa.Column("borrower", sa.String(length=255), nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("format", sa.String(length=16), nullable=False, comment="eBook, Audiobook"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_books_status", "books", ["status"], unique=False)
    op.create_index("ix_books_genre", "books", ["genre"], unique=False)
    op.create_index(
        "uq_books_title_author_ci",
        "books",
        [sa.text("lower(title)"), sa.text("lower(author)")],
        unique=True,
    )

    op.create_table(
        "students",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("roll_no", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("department", sa.String(length=120), nullable=False),
        sa.Column("year_of_study", sa.Integer(), nullable=False),
        sa.Column("admission_year", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("roll_no"),
    )
    op.create_index("ix_students_department", "students", ["department"], unique=False)

    op.create_table(
        "borrow_records",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("student_name", sa.String(length=255), nullable=False),
        sa.Column("student_id", sa.String(length=64), nullable=False),
        sa.Column("book_title", sa.String(length=255), nullable=False),
        sa.Column("borrow_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "return_status",
            sa.String(length=16),
            nullable=False,
            comment="Returned, Not Returned, Overdue",
        ),
        sa.Column("student_email", sa.String(length=255), nullable=True),
        sa.Column("student_phone", sa.String(length=32), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_borrow_records_due_date", "borrow_records", ["due_date"], unique=False)
    op.create_index("ix_borrow_records_return_status", "borrow_records", ["return_status"], unique=False)
    op.create_index("ix_borrow_records_student_id", "borrow_records", ["student_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_borrow_records_student_id", table_name="borrow_records")
    op.drop_index("ix_borrow_records_return_status", table_name="borrow_records")
    op.drop_index("ix_borrow_records_due_date", table_name="borrow_records")
    op.drop_table("borrow_records")
    op.drop_index("ix_students_department", table_name="students")
    op.drop_table("students")
    op.drop_index("uq_books_title_author_ci", table_name="books")
    op.drop_index("ix_books_genre", table_name="books")
    op.drop_index("ix_books_status", table_name="books")
    op.drop_table("books")
