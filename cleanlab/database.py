"""
Database engine, session factory and store error mapping
"""
from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from cleanlab.config import settings
from cleanlab.errors import (
    CleanLabError,
    ConflictError,
    TransientStoreError,
    UnexpectedError,
)
from cleanlab.logger import logger


def _engine_kwargs(database_url: str) -> dict:
    """Bounded waits for both the pool and the underlying driver"""
    if database_url.startswith("sqlite"):
        return {
            "connect_args": {
                "check_same_thread": False,
                "timeout": settings.db_pool_timeout,
            }
        }
    return {
        "pool_size": 10,
        "max_overflow": 0,
        "pool_timeout": settings.db_pool_timeout,
        "pool_pre_ping": True,
    }


engine = create_engine(settings.database_url, **_engine_kwargs(settings.database_url))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """FastAPI dependency yielding one session per request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create tables and seed the service catalog"""
    from cleanlab import models  # noqa: F401  registers tables on Base
    from cleanlab.services.catalog_service import seed_default_services

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_default_services(db)
    finally:
        db.close()


@contextmanager
def store_guard(db: Session, operation: str):
    """
    Run a unit of work against the store.

    Business errors are re-raised after rollback. Driver and pool failures
    are mapped onto the error kinds the API understands and logged with the
    operation name only.
    """
    try:
        yield
    except CleanLabError:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        logger.warning(f"Integrity violation during {operation}")
        raise ConflictError()
    except (OperationalError, PoolTimeoutError, DisconnectionError):
        db.rollback()
        logger.opt(exception=True).error(f"Store unavailable during {operation}")
        raise TransientStoreError()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Store error during {operation}")
        raise UnexpectedError()
