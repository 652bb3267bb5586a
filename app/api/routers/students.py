"""
app/api/routers/students.py

Student management endpoints. Students are addressed by roll number.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.dependencies import require_api_key
from app.schemas.base import MessageResponse
from app.schemas.students import StudentCreateRequest, StudentResponse, StudentUpdateRequest
from db.models.student import Student
from db.session import get_db

router = APIRouter(prefix="/api/students", tags=["students"], dependencies=[Depends(require_api_key)])


def _to_response(student: Student) -> StudentResponse:
    return StudentResponse(
        id=student.id,
        roll_no=student.roll_no,
        name=student.name,
        department=student.department,
        year_of_study=student.year_of_study,
        admission_year=student.admission_year,
        email=student.email,
        created_at=student.created_at,
        updated_at=student.updated_at,
    )


def _get_student_or_404(db: Session, roll_no: str) -> Student:
    student = db.execute(select(Student).where(Student.roll_no == roll_no)).scalars().first()
    if student is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    return student


@router.get("", response_model=list[StudentResponse])
def list_students(db: Session = Depends(get_db)) -> list[StudentResponse]:
    students = db.execute(select(Student).order_by(Student.roll_no)).scalars().all()
    return [_to_response(student) for student in students]


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
def create_student(body: StudentCreateRequest, db: Session = Depends(get_db)) -> StudentResponse:
    """
    Create a new student.

    Raises HTTP 409 if the roll number is already taken.
    """
    student = Student(**body.model_dump())
    db.add(student)
    try:
        db.commit()
        db.refresh(student)
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"A student with roll number {body.roll_no!r} already exists.",
        )
    return _to_response(student)


@router.put("/{roll_no}", response_model=StudentResponse)
def update_student(
    roll_no: str,
    body: StudentUpdateRequest,
    db: Session = Depends(get_db),
) -> StudentResponse:
    student = _get_student_or_404(db, roll_no)
    for field_name, value in body.model_dump(exclude_unset=True).items():
        setattr(student, field_name, value)
    try:
        db.commit()
        db.refresh(student)
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Another student already uses that roll number.",
        )
    return _to_response(student)


@router.delete("/{roll_no}", response_model=MessageResponse)
def delete_student(roll_no: str, db: Session = Depends(get_db)) -> MessageResponse:
    student = _get_student_or_404(db, roll_no)
    db.delete(student)
    db.commit()
    return MessageResponse(message="Student deleted")
