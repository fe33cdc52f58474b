# app/services/movement_service.py
"""
Entry/exit state machine and movement audit trail.

Two states per vehicle:  outside --entry--> inside,  inside --exit--> outside.
record_movement is the only writer of Vehicle.status and of movement rows.
Both writes share one transaction, so the cached status and the log never
disagree: either the audit row and the new status commit together or
neither does.

Redundant transitions (entry while already inside) are recorded as-is.
The log records what the guard did, and which action to offer is the caller's
choice (see next_movement_type).
"""

from dataclasses import dataclass
from typing import Optional
from sqlalchemy.orm import Session
from app.errors import VehicleNotFoundError
from app.models.movement import Movement, MOVEMENT_ENTRY, MOVEMENT_EXIT
from app.models.vehicle import Vehicle, STATUS_INSIDE, STATUS_OUTSIDE
from app.utils.clock import utc_now
from app.utils.logger import get_logger

logger = get_logger(__name__)

MOVEMENT_TYPES = (MOVEMENT_ENTRY, MOVEMENT_EXIT)
GUARD_HISTORY_MAX = 500


@dataclass(frozen=True)
class MovementResult:
    movement_id: int
    new_status: str


def status_after(movement_type: str) -> str:
    return STATUS_INSIDE if movement_type == MOVEMENT_ENTRY else STATUS_OUTSIDE


def next_movement_type(status: str) -> str:
    """The transition a guard should be offered for a vehicle in this status."""
    return MOVEMENT_EXIT if status == STATUS_INSIDE else MOVEMENT_ENTRY


def _apply_status(vehicle: Vehicle, movement_type: str):
    vehicle.status = status_after(movement_type)
    vehicle.updated_at = utc_now()


def record_movement(db: Session, vehicle_id: int, movement_type: str,
                    guard_id: Optional[int] = None) -> MovementResult:
    """
    Append a movement and flip the vehicle's status in a single transaction.

    The vehicle row is locked (SELECT ... FOR UPDATE) for the duration, so
    concurrent movements on the same vehicle are serialized by the database
    and the last one to commit determines the final status.

    Raises VehicleNotFoundError for an unknown vehicle and ValueError for an
    unknown movement type; database errors are re-raised after rollback.
    """
    if movement_type not in MOVEMENT_TYPES:
        raise ValueError(f"movement type must be one of {MOVEMENT_TYPES}, got {movement_type!r}")

    try:
        vehicle = (
            db.query(Vehicle)
            .filter(Vehicle.id == vehicle_id)
            .with_for_update()
            .first()
        )
        if vehicle is None:
            raise VehicleNotFoundError(vehicle_id)

        movement = Movement(
            vehicle_id=vehicle.id,
            guard_id=guard_id,
            type=movement_type,
            created_at=utc_now(),
        )
        db.add(movement)
        db.flush()
        movement_id = movement.id

        _apply_status(vehicle, movement_type)
        db.commit()
    except Exception:
        db.rollback()
        logger.error(f"Movement {movement_type} for vehicle {vehicle_id} rolled back", exc_info=True)
        raise

    result = MovementResult(movement_id=movement_id, new_status=status_after(movement_type))
    logger.info(f"[{movement_type.upper()}] vehicle={vehicle_id} guard={guard_id} → {result.new_status}")
    return result


def list_vehicle_movements(db: Session, vehicle_id: int, limit: int = 50) -> list[Movement]:
    """A vehicle's movement history, newest first."""
    return (
        db.query(Movement)
        .filter(Movement.vehicle_id == vehicle_id)
        .order_by(Movement.created_at.desc(), Movement.id.desc())
        .limit(max(1, limit))
        .all()
    )


def list_guard_movements(db: Session, guard_id: int, limit: int = 100) -> list[dict]:
    """Movements recorded by one guard with the vehicle plate, newest first. Limit clamped to 1..500."""
    safe_limit = min(GUARD_HISTORY_MAX, max(1, int(limit or 100)))
    rows = (
        db.query(Movement.id, Movement.vehicle_id, Vehicle.plate, Movement.type, Movement.created_at)
        .join(Vehicle, Vehicle.id == Movement.vehicle_id)
        .filter(Movement.guard_id == guard_id)
        .order_by(Movement.created_at.desc(), Movement.id.desc())
        .limit(safe_limit)
        .all()
    )
    return [
        {"id": r.id, "vehicle_id": r.vehicle_id, "plate": r.plate, "type": r.type, "created_at": r.created_at}
        for r in rows
    ]
