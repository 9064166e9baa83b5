"""Initialize database tables."""
from sqlmodel import SQLModel

from taskzm.models.task import Task  # noqa: F401  registers the table
from taskzm.db.config import engine
from taskzm.utils.logger import get_logger

logger = get_logger(__name__)


def init_db(bind=None):
    """Create all tables in the database."""
    SQLModel.metadata.create_all(bind if bind is not None else engine)
    logger.info("Tables created", tables=sorted(SQLModel.metadata.tables))


if __name__ == "__main__":
    init_db()
