# app/routers/admin.py
"""Admin panel: guard accounts and their movement history."""

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies import require_admin
from app.errors import DuplicateEmailError, GuardNotFoundError, GuardRoleError
from app.schemas.guard import GuardCreate, GuardOut, GuardUpdate
from app.schemas.movement import GuardMovementOut
from app.services import guard_service
from app.services.movement_service import list_guard_movements

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/admin/guards", response_model=list[GuardOut], summary="List guards")
def list_guards(db: Session = Depends(get_db)):
    return guard_service.list_guards(db)


@router.post("/admin/guards", response_model=GuardOut, status_code=201, summary="Create a guard")
def create_guard(body: GuardCreate, db: Session = Depends(get_db)):
    try:
        return guard_service.create_guard(db, body)
    except DuplicateEmailError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.put("/admin/guards/{guard_id}", response_model=GuardOut, summary="Edit a guard")
def edit_guard(guard_id: int, body: GuardUpdate, db: Session = Depends(get_db)):
    try:
        guard = guard_service.update_guard(db, guard_id, body)
    except DuplicateEmailError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not guard:
        raise HTTPException(status_code=404, detail="Guard not found")
    return guard


@router.delete("/admin/guards/{guard_id}", status_code=204, summary="Delete a guard")
def remove_guard(guard_id: int, db: Session = Depends(get_db)):
    try:
        guard_service.delete_guard(db, guard_id)
    except GuardNotFoundError:
        raise HTTPException(status_code=404, detail="Guard not found")
    except GuardRoleError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return Response(status_code=204)


@router.get("/admin/guards/{guard_id}/movements", response_model=list[GuardMovementOut],
            summary="Movements recorded by a guard")
def guard_movements(guard_id: int, limit: int = 100, db: Session = Depends(get_db)):
    if not guard_service.get_guard(db, guard_id):
        raise HTTPException(status_code=404, detail="Guard not found")
    return list_guard_movements(db, guard_id, limit)
