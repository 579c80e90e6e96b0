from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool
from .config import settings
import logging

logger = logging.getLogger(__name__)


def _engine_options(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        return {
            "connect_args": {"check_same_thread": False, "timeout": settings.db_connect_timeout},
        }
    return {
        "poolclass": QueuePool,
        "pool_size": settings.db_pool_size,  # Number of connections to maintain
        "max_overflow": settings.db_max_overflow,  # Additional connections that can be created
        "pool_pre_ping": True,  # Verify connections before use
        "pool_recycle": settings.db_pool_recycle,
        "pool_timeout": settings.db_pool_timeout,  # Timeout for getting connection from pool
        "connect_args": {
            "connect_timeout": settings.db_connect_timeout,
            "application_name": "foodbridge",
            "options": f"-c statement_timeout={settings.db_statement_timeout_ms}",
        },
    }


engine = create_engine(settings.database_url, echo=False, **_engine_options(settings.database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db(bind=None):
    """Create all tables that do not exist yet"""
    from foodbridge.models import contact, donation, like, otp_challenge, pending_registration, rating, roster  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


def check_connection() -> bool:
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection error: {e}")
        return False
    finally:
        db.close()
