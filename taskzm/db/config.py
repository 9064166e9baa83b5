"""Database configuration for the TaskZM backend."""
from typing import Generator
from sqlmodel import create_engine, Session
import os
from dotenv import load_dotenv
from sqlalchemy import event

from taskzm.utils.logger import get_logger

logger = get_logger(__name__)

load_dotenv()

# SQLite is the local development default
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./taskzm.db")
IS_SQLITE = DATABASE_URL.startswith("sqlite")

if IS_SQLITE:
    logger.info("Using SQLite database", database_url=DATABASE_URL)
else:
    logger.info("Using PostgreSQL database")

# SQLite connections are shared across FastAPI's threadpool
connect_args = {"check_same_thread": False} if IS_SQLITE else {}

engine = create_engine(DATABASE_URL, echo=False, connect_args=connect_args)

if IS_SQLITE:
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()


def get_session() -> Generator[Session, None, None]:
    """Dependency for getting database sessions."""
    with Session(engine) as session:
        yield session
