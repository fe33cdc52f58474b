# app/services/resolver.py
"""
Free-form query resolution: search box text, OCR output or a decoded QR term
is classified as a matricula or a plate and looked up in that order.

Dispatch priority (first hit wins):
  1. exactly 9 digits and nothing else      -> matricula
  2. 6+ chars starting with 3 letters       -> plate (LLL-NNNN)
  3. 6+ digits anywhere in the query        -> matricula (loose fallback)

Ambiguous input is resolved by this order alone; not-found returns None.
"""

import re
from typing import Optional
from sqlalchemy.orm import Session
from app.models.vehicle import Vehicle
from app.services.identifiers import MATRICULA_LENGTH, clean_identifier, digits_only, normalize_plate
from app.services.vehicle_service import (
    find_vehicle_by_plate,
    find_vehicle_by_student_matricula,
    list_vehicles_by_student_matricula,
)
from app.utils.logger import get_logger

logger = get_logger(__name__)

STRATEGY_MATRICULA = "matricula"
STRATEGY_PLATE = "plate"

_PLATE_PREFIX = re.compile(r"^[A-ZÑ]{3}")


def plan_lookups(query: str) -> list[tuple[str, str]]:
    """Ordered (strategy, term) lookups to attempt for a query. Empty when nothing applies."""
    trimmed = (query or "").strip()
    if not trimmed:
        return []

    clean = clean_identifier(trimmed)
    digits = digits_only(clean)
    plan = []

    if len(digits) == MATRICULA_LENGTH and clean == digits:
        plan.append((STRATEGY_MATRICULA, digits))

    if len(clean) >= 6 and _PLATE_PREFIX.match(clean):
        plan.append((STRATEGY_PLATE, normalize_plate(clean)))

    if len(digits) >= 6:
        # A pure 9-digit query already tried this exact lookup
        if (STRATEGY_MATRICULA, digits) not in plan:
            plan.append((STRATEGY_MATRICULA, digits))

    return plan


def _lookup(db: Session, strategy: str, term: str) -> Optional[Vehicle]:
    if strategy == STRATEGY_PLATE:
        return find_vehicle_by_plate(db, term)
    return find_vehicle_by_student_matricula(db, term)


def search_vehicle(db: Session, query: str) -> Optional[Vehicle]:
    """
    Resolve a free-form query to a vehicle (with its student), or None.
    Blank queries return None without touching the database.
    Database errors propagate to the caller.
    """
    for strategy, term in plan_lookups(query):
        vehicle = _lookup(db, strategy, term)
        if vehicle:
            logger.info(f"Query {query!r} resolved by {strategy} {term} → vehicle {vehicle.id}")
            return vehicle

    logger.info(f"Query {query!r} matched no vehicle")
    return None


def list_student_vehicles(db: Session, matricula: str) -> list[Vehicle]:
    """All vehicles of one student (newest first). Skips dispatch: the input is a matricula."""
    return list_vehicles_by_student_matricula(db, matricula)
