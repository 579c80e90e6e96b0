import logging
import threading
import time

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError, SQLAlchemyError, TimeoutError as PoolTimeoutError

from foodbridge.api.v1 import api_router
from foodbridge.api.deps import get_email_service
from foodbridge.core.config import settings
from foodbridge.core.database import SessionLocal, check_connection, init_db
from foodbridge.services.registration_service import RegistrationService

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="FoodBridge",
    description="Food surplus redistribution between donor and receiver organizations",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or [settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(part) for part in error["loc"][1:]), "message": error["msg"]}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request", "errors": errors},
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    if isinstance(exc, (PoolTimeoutError, OperationalError)):
        logger.error(f"Database unavailable during {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Service temporarily unavailable. Please try again."},
            headers={"Retry-After": "5"},
        )
    logger.exception(f"Database error during {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
    )


@app.get("/")
def read_root():
    return {"message": "FoodBridge API is running!"}


@app.get("/health")
def health_check():
    return {"status": "healthy"}


@app.get("/health/db")
def database_health_check():
    """Check database connection health"""
    if check_connection():
        return {"status": "healthy", "database": "connected"}
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "unhealthy", "database": "disconnected"},
    )


def cleanup_pending_registrations():
    db = SessionLocal()
    try:
        RegistrationService(db, get_email_service()).cleanup_expired()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Pending registration cleanup failed: {e}")
    finally:
        db.close()


def schedule_cleanup():
    while True:
        cleanup_pending_registrations()
        time.sleep(settings.cleanup_interval_seconds)


@app.on_event("startup")
def on_startup():
    init_db()
    if settings.cleanup_enabled:
        threading.Thread(target=schedule_cleanup, daemon=True, name="pending-registration-cleanup").start()
