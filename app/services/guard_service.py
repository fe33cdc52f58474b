# app/services/guard_service.py
"""
Guard and admin accounts: login, and the admin panel's guard management.
Emails are stored lower-cased; gates are clamped to 1-15.
"""

from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.errors import DuplicateEmailError, GuardNotFoundError, GuardRoleError
from app.models.guard import Guard, ROLE_ADMIN, ROLE_GUARD
from app.models.movement import Movement
from app.schemas.guard import GuardCreate, GuardUpdate, SessionUser
from app.utils.logger import get_logger
from app.utils.security import hash_password, verify_password

logger = get_logger(__name__)

MIN_GATE = 1
MAX_GATE = 15
MIN_PASSWORD_LENGTH = 8


def clamp_gate(gate: Optional[int]) -> int:
    if gate is None:
        return MIN_GATE
    return min(MAX_GATE, max(MIN_GATE, int(gate)))


def _clean_location(location_name: Optional[str]) -> Optional[str]:
    if location_name is None or not location_name.strip():
        return None
    return location_name.strip()


def to_session_user(guard: Guard) -> SessionUser:
    return SessionUser(id=guard.id, email=guard.email, role=guard.role,
                       full_name=guard.full_name, gate=guard.gate)


def find_guard_by_email(db: Session, email: str) -> Optional[Guard]:
    return db.query(Guard).filter(Guard.email == email.strip().lower()).first()


def get_guard(db: Session, guard_id: int) -> Optional[Guard]:
    return db.query(Guard).filter(Guard.id == guard_id).first()


def list_guards(db: Session) -> list[Guard]:
    return db.query(Guard).filter(Guard.role == ROLE_GUARD).order_by(Guard.full_name).all()


def authenticate(db: Session, email: str, password: str) -> Optional[Guard]:
    """Returns the account if the credentials match, else None."""
    guard = find_guard_by_email(db, email)
    if not guard or not verify_password(password, guard.password_hash):
        logger.info(f"Failed login for {email.strip().lower()}")
        return None
    return guard


def _commit(db: Session, email: str):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateEmailError(email)


def create_guard(db: Session, data: GuardCreate) -> Guard:
    if len(data.password) < MIN_PASSWORD_LENGTH:
        raise ValueError("Password must be at least 8 characters long")
    email = data.email.strip().lower()
    if find_guard_by_email(db, email):
        raise DuplicateEmailError(email)

    guard = Guard(
        email=email,
        password_hash=hash_password(data.password),
        role=ROLE_GUARD,
        full_name=data.full_name.strip(),
        gate=clamp_gate(data.gate),
        location_name=_clean_location(data.location_name),
    )
    db.add(guard)
    _commit(db, email)
    db.refresh(guard)
    logger.info(f"Guard created: {email} at gate {guard.gate}")
    return guard


def update_guard(db: Session, guard_id: int, data: GuardUpdate) -> Optional[Guard]:
    """Edit a guard's email, name, gate and location. Admin accounts are not editable here."""
    guard = get_guard(db, guard_id)
    if not guard or guard.role != ROLE_GUARD:
        return None
    email = data.email.strip().lower()
    other = find_guard_by_email(db, email)
    if other and other.id != guard_id:
        raise DuplicateEmailError(email)

    guard.email = email
    guard.full_name = data.full_name.strip()
    guard.gate = clamp_gate(data.gate)
    guard.location_name = _clean_location(data.location_name)
    _commit(db, email)
    db.refresh(guard)
    return guard


def delete_guard(db: Session, guard_id: int):
    """Delete a guard account. Their movements stay in the log, unattributed."""
    guard = get_guard(db, guard_id)
    if not guard:
        raise GuardNotFoundError(guard_id)
    if guard.role != ROLE_GUARD:
        raise GuardRoleError("Administrator accounts cannot be deleted")
    email = guard.email
    # ON DELETE SET NULL is not enforced by every backend
    released = (
        db.query(Movement)
        .filter(Movement.guard_id == guard_id)
        .update({Movement.guard_id: None}, synchronize_session=False)
    )
    db.delete(guard)
    db.commit()
    logger.info(f"Guard deleted: {email} ({released} movements unattributed)")


def ensure_admin(db: Session, email: str, full_name: str, password: str) -> Guard:
    """Create the admin account, or reset its name and password if it exists."""
    email = email.strip().lower()
    admin = find_guard_by_email(db, email)
    if admin is None:
        admin = Guard(email=email, role=ROLE_ADMIN, gate=None)
        db.add(admin)
    admin.full_name = full_name
    admin.password_hash = hash_password(password)
    db.commit()
    db.refresh(admin)
    return admin
