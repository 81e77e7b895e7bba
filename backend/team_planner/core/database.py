import logging

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from team_planner.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

connect_args = {}
if settings.database_url.startswith("sqlite"):
    # Sessions are created in the threadpool and used on the event loop
    connect_args["check_same_thread"] = False

engine = create_engine(settings.database_url, pool_pre_ping=True, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Request-scoped session; rolled back if the request fails on a store error."""
    db = SessionLocal()
    try:
        yield db
    except SQLAlchemyError:
        logger.exception("Database error, rolling back session")
        db.rollback()
        raise
    finally:
        db.close()
