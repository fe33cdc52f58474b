# app/routers/vehicles.py
"""Vehicle search and registration: what guards use at the gate."""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies import get_current_user, require_admin
from app.errors import DuplicatePlateError
from app.schemas.movement import MovementOut
from app.schemas.vehicle import VehicleIn, VehicleOut
from app.services import movement_service, vehicle_service
from app.services.identifiers import validate_matricula, validate_plate
from app.services.resolver import list_student_vehicles, search_vehicle

router = APIRouter(dependencies=[Depends(get_current_user)])


def _validate_identifiers(body: VehicleIn):
    for field_name, result in (("plate", validate_plate(body.plate)),
                               ("student_id", validate_matricula(body.student_id))):
        if not result.valid:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"field": field_name, "reason": result.reason.value, "message": result.message},
            )


@router.get("/vehicles", response_model=VehicleOut, summary="Search by plate or matricula")
def search(q: str = "", db: Session = Depends(get_db)):
    """Accepts anything a guard might type or a camera might read; see services/resolver.py."""
    if not q.strip():
        raise HTTPException(status_code=400, detail="Query parameter q (plate or matricula) is required")
    vehicle = search_vehicle(db, q)
    if not vehicle:
        raise HTTPException(status_code=404, detail="No record")
    return VehicleOut.from_vehicle(vehicle)


@router.get("/vehicles/student/{matricula}", response_model=list[VehicleOut],
            summary="All vehicles of a student")
def student_vehicles(matricula: str, db: Session = Depends(get_db)):
    return [VehicleOut.from_vehicle(v) for v in list_student_vehicles(db, matricula)]


@router.post("/vehicles", response_model=VehicleOut, status_code=201, summary="Register a vehicle")
def register_vehicle(body: VehicleIn, db: Session = Depends(get_db)):
    """Creates the student too if the matricula is new. New vehicles start outside."""
    _validate_identifiers(body)
    try:
        vehicle = vehicle_service.create_vehicle(db, body)
    except DuplicatePlateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return VehicleOut.from_vehicle(vehicle)


@router.get("/vehicles/{vehicle_id}", response_model=VehicleOut, summary="Get a vehicle")
def get_vehicle(vehicle_id: int, db: Session = Depends(get_db)):
    vehicle = vehicle_service.get_vehicle(db, vehicle_id)
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return VehicleOut.from_vehicle(vehicle)


@router.put("/vehicles/{vehicle_id}", response_model=VehicleOut, summary="Edit a vehicle")
def edit_vehicle(vehicle_id: int, body: VehicleIn, db: Session = Depends(get_db)):
    _validate_identifiers(body)
    try:
        vehicle = vehicle_service.update_vehicle(db, vehicle_id, body)
    except DuplicatePlateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return VehicleOut.from_vehicle(vehicle)


@router.delete("/vehicles/{vehicle_id}", status_code=204, summary="Remove a vehicle (admin)",
               dependencies=[Depends(require_admin)])
def remove_vehicle(vehicle_id: int, db: Session = Depends(get_db)):
    if not vehicle_service.delete_vehicle(db, vehicle_id):
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return Response(status_code=204)


@router.get("/vehicles/{vehicle_id}/movements", response_model=list[MovementOut],
            summary="Movement history of a vehicle")
def vehicle_movements(vehicle_id: int, limit: int = 50, db: Session = Depends(get_db)):
    return movement_service.list_vehicle_movements(db, vehicle_id, limit)
