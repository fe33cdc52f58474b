# app/dependencies.py
"""
FastAPI auth dependencies.
The session JWT is read from the `session` cookie, or from an
`Authorization: Bearer` header for non-browser clients.
"""

from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from app.schemas.guard import SessionUser
from app.utils.security import decode_session_token

COOKIE_NAME = "session"


def _token_from_request(request: Request) -> Optional[str]:
    token = request.cookies.get(COOKIE_NAME)
    if token:
        return token
    auth = request.headers.get("Authorization", "")
    if auth.lower().startswith("bearer "):
        return auth[7:].strip() or None
    return None


def get_current_user(request: Request) -> SessionUser:
    token = _token_from_request(request)
    user = decode_session_token(token) if token else None
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return user


def require_admin(user: SessionUser = Depends(get_current_user)) -> SessionUser:
    if user.role != "admin":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Administrator role required")
    return user


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"
