# app/routers/auth.py
"""
Login / logout / session for guards and admins.
Login is limited per client IP (see services/rate_limiter.py).
"""

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session
from app.config import settings
from app.database import get_db
from app.dependencies import COOKIE_NAME, client_ip, get_current_user
from app.schemas.guard import LoginRequest, SessionUser
from app.services.guard_service import authenticate, to_session_user
from app.services.rate_limiter import login_limiter
from app.utils.logger import get_logger
from app.utils.security import create_session_token

router = APIRouter()
logger = get_logger(__name__)


@router.post("/auth/login", summary="Log in and receive the session cookie")
def login(body: LoginRequest, request: Request, response: Response, db: Session = Depends(get_db)):
    ip = client_ip(request)
    if not login_limiter.hit(ip):
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                            detail="Too many attempts. Try again in 15 minutes.")

    guard = authenticate(db, body.email, body.password)
    if not guard:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    login_limiter.reset(ip)
    user = to_session_user(guard)
    response.set_cookie(
        COOKIE_NAME,
        create_session_token(user),
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        path="/",
    )
    logger.info(f"Login: {user.email} ({user.role})")
    return {"user": user}


@router.post("/auth/logout", summary="Clear the session cookie")
def logout(response: Response):
    response.delete_cookie(COOKIE_NAME, path="/")
    return {"ok": True}


@router.get("/auth/session", summary="Current session user")
def session(user: SessionUser = Depends(get_current_user)):
    return {"user": user}
