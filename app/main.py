# app/main.py
"""
FastAPI application entry point.
Includes CORS, request timing, global error handlers, and all routers.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import OperationalError
from app.routers import admin, auth, health, lookup, movements, students, vehicles
from app.database import create_tables
from app.config import settings
from app.utils.logger import get_logger
import time

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Campus access control backend starting up...")
    create_tables()
    logger.info("✅ Database tables ready")
    if settings.QR_SECRET:
        logger.info("🔐 Encrypted QR payloads enabled")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")
    yield
    logger.info("🛑 Campus access control backend shutting down...")


app = FastAPI(
    title="Campus Vehicle Access Control API",
    description="Gate lookups by plate / matricula / QR and entry-exit recording.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# ── CORS (guard stations run the web UI from another origin) ─────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to the UI origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Global Exception Handlers ────────────────────────────────────────────────
@app.exception_handler(OperationalError)
async def database_unavailable_handler(request: Request, exc: OperationalError):
    logger.error(f"Database unavailable on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Record store unavailable"},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(auth.router,      prefix="/api/v1", tags=["🔑 Auth"])
app.include_router(vehicles.router,  prefix="/api/v1", tags=["🚗 Vehicles"])
app.include_router(movements.router, prefix="/api/v1", tags=["🚦 Movements"])
app.include_router(lookup.router,    prefix="/api/v1", tags=["🔍 Lookup & QR"])
app.include_router(students.router,  prefix="/api/v1", tags=["🎓 Students"])
app.include_router(admin.router,     prefix="/api/v1", tags=["🛡️ Admin"])
app.include_router(health.router,    prefix="/api/v1", tags=["💚 Health"])
