# app/utils/security.py
"""
Password hashing (bcrypt) and session tokens (HS256 JWT).
The session token is what the `session` cookie carries.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any

import bcrypt
from jose import JWTError, jwt

from app.config import settings
from app.schemas.guard import SessionUser
from app.utils.logger import get_logger

logger = get_logger(__name__)

ALGORITHM = "HS256"
MIN_SECRET_LENGTH = 16
BCRYPT_ROUNDS = 10
BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > BCRYPT_MAX_BYTES:
        raise ValueError("Password cannot be longer than 72 bytes")
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def _secret(secret: Optional[str]) -> str:
    secret = secret or settings.JWT_SECRET
    if len(secret) < MIN_SECRET_LENGTH:
        raise RuntimeError("JWT_SECRET must be at least 16 characters long")
    return secret


def create_session_token(user: SessionUser, secret: Optional[str] = None,
                         max_age_seconds: Optional[int] = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + timedelta(seconds=max_age_seconds or settings.SESSION_MAX_AGE_SECONDS)
    claims: Dict[str, Any] = {
        "userId": user.id,
        "email": user.email,
        "role": user.role,
        "fullName": user.full_name,
        "iat": now,
        "exp": expire,
    }
    if user.gate is not None:
        claims["gate"] = user.gate
    return jwt.encode(claims, _secret(secret), algorithm=ALGORITHM)


def decode_session_token(token: str, secret: Optional[str] = None) -> Optional[SessionUser]:
    """Returns the session user, or None if the token is invalid, expired or incomplete."""
    try:
        payload = jwt.decode(token, _secret(secret), algorithms=[ALGORITHM])
    except JWTError:
        return None

    email, role, full_name = payload.get("email"), payload.get("role"), payload.get("fullName")
    if not all(isinstance(v, str) for v in (email, role, full_name)) or role not in ("admin", "guard"):
        return None
    try:
        user_id = int(payload.get("userId"))
    except (TypeError, ValueError):
        return None

    gate = payload.get("gate")
    return SessionUser(id=user_id, email=email, role=role, full_name=full_name,
                       gate=int(gate) if gate is not None else None)
