# app/services/student_service.py
"""
Student lookup and find-or-create.
Matriculas are normalized before every read and write so that
"2021-6160-6" and "202161606" are the same student.
"""

from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.models.student import Student
from app.services.identifiers import normalize_matricula
from app.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_STUDENT_NAME = "Sin nombre"


def find_student_by_matricula(db: Session, matricula: str) -> Optional[Student]:
    """Returns None if no student has that matricula."""
    digits = normalize_matricula(matricula)
    if not digits:
        return None
    return db.query(Student).filter(Student.matricula == digits).first()


def get_student(db: Session, student_id: int) -> Optional[Student]:
    return db.query(Student).filter(Student.id == student_id).first()


def find_or_create_student(db: Session, matricula: str, full_name: str) -> Student:
    """
    Idempotent on matricula: returns the existing student, or inserts one.
    The insert runs in a savepoint; if a concurrent registration created the
    same matricula first, the unique constraint fires, the savepoint is
    rolled back and the winner's row is returned. The caller commits.
    """
    digits = normalize_matricula(matricula)
    existing = find_student_by_matricula(db, digits)
    if existing:
        return existing

    name = (full_name or "").strip() or DEFAULT_STUDENT_NAME
    try:
        with db.begin_nested():
            student = Student(matricula=digits, full_name=name)
            db.add(student)
    except IntegrityError:
        logger.info(f"Student {digits} created concurrently, re-reading existing row")
        student = find_student_by_matricula(db, digits)
        if student is None:
            raise
        return student

    logger.info(f"New student registered: {digits}")
    return student


def update_student(db: Session, student_id: int, full_name: str, matricula: str) -> Optional[Student]:
    """Profile edit. Returns None if the student does not exist. Commits."""
    student = get_student(db, student_id)
    if not student:
        return None
    student.full_name = full_name.strip() or DEFAULT_STUDENT_NAME
    student.matricula = normalize_matricula(matricula)
    db.commit()
    db.refresh(student)
    return student
