# app/routers/students.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies import get_current_user
from app.schemas.student import StudentOut, StudentUpdate
from app.services.identifiers import validate_matricula
from app.services.student_service import update_student

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.put("/students/{student_id}", response_model=StudentOut, summary="Edit a student's name and matricula")
def edit_student(student_id: int, body: StudentUpdate, db: Session = Depends(get_db)):
    check = validate_matricula(body.student_id)
    if not check.valid:
        raise HTTPException(status_code=400, detail={"field": "student_id", "reason": check.reason.value,
                                                     "message": check.message})
    try:
        student = update_student(db, student_id, body.full_name, body.student_id)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Matricula already belongs to another student")
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    return StudentOut(id=student.id, student_id=student.matricula,
                      full_name=student.full_name, email=student.email)
