# app/services/vehicle_service.py
"""
Vehicle record store: lookups by plate / matricula and create-update-delete.
Plates are normalized on every read and write. Status is never written here;
see movement_service.record_movement.
"""

from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.errors import DuplicatePlateError
from app.models.helmet import Helmet
from app.models.student import Student
from app.models.vehicle import Vehicle, HELMET_VEHICLE_TYPES, STATUS_OUTSIDE
from app.schemas.vehicle import VehicleIn
from app.services.identifiers import normalize_matricula, normalize_plate
from app.services.student_service import find_or_create_student
from app.utils.logger import get_logger

logger = get_logger(__name__)


def get_vehicle(db: Session, vehicle_id: int) -> Optional[Vehicle]:
    return db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()


def find_vehicle_by_plate(db: Session, plate: str) -> Optional[Vehicle]:
    """Find a registered vehicle by plate number. Returns None if not found."""
    return db.query(Vehicle).filter(Vehicle.plate == normalize_plate(plate)).first()


def _student_vehicles_query(db: Session, matricula: str):
    return (
        db.query(Vehicle)
        .join(Student, Vehicle.student_id == Student.id)
        .filter(Student.matricula == normalize_matricula(matricula))
    )


def find_vehicle_by_student_matricula(db: Session, matricula: str) -> Optional[Vehicle]:
    """First vehicle registered to the student, or None."""
    if not normalize_matricula(matricula):
        return None
    return _student_vehicles_query(db, matricula).order_by(Vehicle.id).first()


def list_vehicles_by_student_matricula(db: Session, matricula: str) -> list[Vehicle]:
    """All of the student's vehicles, most recently registered first."""
    if not normalize_matricula(matricula):
        return []
    return (
        _student_vehicles_query(db, matricula)
        .order_by(Vehicle.created_at.desc(), Vehicle.id.desc())
        .all()
    )


def resize_helmets(descriptions: list[str], count: int) -> list[str]:
    """Truncate extra descriptions, pad missing ones with empty strings."""
    count = max(0, count)
    return (list(descriptions) + [""] * count)[:count]


def _apply_fields(db: Session, vehicle: Vehicle, data: VehicleIn):
    student = find_or_create_student(db, data.student_id, data.student_name)
    vehicle.student_id = student.id
    vehicle.student = student
    vehicle.plate = normalize_plate(data.plate)
    vehicle.vehicle_type = data.vehicle_type
    vehicle.vehicle_description = data.vehicle_description
    vehicle.vehicle_photo_path = data.vehicle_photo_path

    # Helmets only make sense on two-wheelers
    if data.vehicle_type in HELMET_VEHICLE_TYPES and data.has_helmet:
        vehicle.has_helmet = True
        vehicle.helmet_count = max(0, data.helmet_count)
        descriptions = resize_helmets([h.description for h in data.helmets], vehicle.helmet_count)
    else:
        vehicle.has_helmet = False
        vehicle.helmet_count = 0
        descriptions = []

    vehicle.helmets = [
        Helmet(description=text.strip(), sort_order=i)
        for i, text in enumerate(d for d in descriptions if d.strip())
    ]


def _ensure_plate_free(db: Session, plate: str, vehicle_id: Optional[int] = None):
    existing = find_vehicle_by_plate(db, plate)
    if existing and existing.id != vehicle_id:
        raise DuplicatePlateError(normalize_plate(plate))


def _commit(db: Session, plate: str):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicatePlateError(normalize_plate(plate))


def create_vehicle(db: Session, data: VehicleIn) -> Vehicle:
    """Register a vehicle (and its student, if new). New vehicles start outside."""
    _ensure_plate_free(db, data.plate)
    vehicle = Vehicle(status=STATUS_OUTSIDE)
    _apply_fields(db, vehicle, data)
    db.add(vehicle)
    _commit(db, data.plate)
    db.refresh(vehicle)
    logger.info(f"Vehicle registered: {vehicle.plate} ({vehicle.vehicle_type}) for {vehicle.student.matricula}")
    return vehicle


def update_vehicle(db: Session, vehicle_id: int, data: VehicleIn) -> Optional[Vehicle]:
    """Edit a vehicle's details. Returns None if it does not exist. Status is untouched."""
    vehicle = get_vehicle(db, vehicle_id)
    if not vehicle:
        return None
    _ensure_plate_free(db, data.plate, vehicle_id)
    _apply_fields(db, vehicle, data)
    _commit(db, data.plate)
    db.refresh(vehicle)
    logger.info(f"Vehicle {vehicle_id} updated: {vehicle.plate}")
    return vehicle


def delete_vehicle(db: Session, vehicle_id: int) -> bool:
    """Delete a vehicle with its helmets and movement history."""
    vehicle = get_vehicle(db, vehicle_id)
    if not vehicle:
        return False
    plate = vehicle.plate
    db.delete(vehicle)
    db.commit()
    logger.info(f"Vehicle {vehicle_id} ({plate}) deleted")
    return True
