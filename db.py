"""Database engine, per-request sessions, and startup table creation."""
import logging
import time

from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlmodel import SQLModel, Session, create_engine

from config import get_settings

logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
    else:
        connect_args = {}

    return create_engine(
        database_url,
        connect_args=connect_args,
        echo=False,
        pool_pre_ping=not database_url.startswith("sqlite"),
    )


engine = build_engine(get_settings().database_url)


#This function gives me a session (temporary connection) to the database.
# It opens before each request and closes automatically after.
def get_session():
    """Provide a database session per request."""
    with Session(engine) as session:
        yield session


def init_db(target: Engine, retries: int = 10, delay: float = 2.0) -> None:
    """Create all tables, waiting for the database to accept connections.

    Raises the last OperationalError once ``retries`` attempts are used up.
    """
    last_exc: Exception | None = None

    for attempt in range(1, retries + 1):
        try:
            SQLModel.metadata.create_all(target)
            logger.info("Database ready, tables created.")
            return
        except OperationalError as exc:
            last_exc = exc
            logger.warning(
                "DB not ready yet (attempt %d/%d); waiting %ss...",
                attempt, retries, delay,
            )
            time.sleep(delay)

    logger.error("Giving up connecting to the database.")
    if last_exc:
        raise last_exc
    raise RuntimeError("Database not reachable on startup.")
