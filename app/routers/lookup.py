# app/routers/lookup.py
"""
Identifier helpers for the guard UI (live plate formatting, validation
messages) and QR resolution.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.config import settings
from app.database import get_db
from app.dependencies import get_current_user
from app.schemas.lookup import FormattedOut, IdentifierIn, QrResolveOut, QrScanIn, ValidationOut
from app.schemas.vehicle import VehicleOut
from app.services.identifiers import (
    format_plate_input,
    normalize_matricula,
    normalize_plate,
    validate_matricula,
    validate_plate,
)
from app.services.qr_decoder import decode_qr_payload
from app.services.resolver import search_vehicle

router = APIRouter(dependencies=[Depends(get_current_user)])


def _validation_out(result, normalized: str) -> ValidationOut:
    return ValidationOut(
        valid=result.valid,
        normalized=normalized,
        reason=result.reason.value if result.reason else None,
        message=result.message,
    )


@router.post("/validate/plate", response_model=ValidationOut, summary="Validate a Puebla plate")
def check_plate(body: IdentifierIn):
    return _validation_out(validate_plate(body.value), normalize_plate(body.value))


@router.post("/validate/matricula", response_model=ValidationOut, summary="Validate a matricula")
def check_matricula(body: IdentifierIn):
    return _validation_out(validate_matricula(body.value), normalize_matricula(body.value))


@router.post("/format/plate", response_model=FormattedOut, summary="As-you-type plate formatting")
def format_plate(body: IdentifierIn):
    return FormattedOut(formatted=format_plate_input(body.value))


@router.post("/qr/resolve", response_model=QrResolveOut, summary="Resolve a scanned QR code")
def resolve_scan(body: QrScanIn, db: Session = Depends(get_db)):
    """
    Decodes the institutional QR payload (plain, base64 or encrypted JSON).
    If it carries no payload, the raw text is searched as a plate/matricula.
    """
    payload = decode_qr_payload(body.raw, settings.QR_SECRET)
    search_term = payload.search_term if payload else body.raw.strip()
    vehicle = search_vehicle(db, search_term)
    return QrResolveOut(
        search_term=search_term,
        action=payload.action if payload else None,
        decoded=payload is not None,
        vehicle=VehicleOut.from_vehicle(vehicle) if vehicle else None,
    )
