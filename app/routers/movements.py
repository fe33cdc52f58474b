# app/routers/movements.py
"""Record entries and exits. The guard is taken from the session."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies import get_current_user
from app.errors import VehicleNotFoundError
from app.schemas.guard import SessionUser
from app.schemas.movement import MovementCreate, MovementResultOut
from app.services.movement_service import record_movement

router = APIRouter()


@router.post("/movements", response_model=MovementResultOut, status_code=201,
             summary="Record an entry or exit")
def create_movement(body: MovementCreate, db: Session = Depends(get_db),
                    user: SessionUser = Depends(get_current_user)):
    try:
        result = record_movement(db, body.vehicle_id, body.type, guard_id=user.id)
    except VehicleNotFoundError:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return MovementResultOut(movement_id=result.movement_id, new_status=result.new_status)
