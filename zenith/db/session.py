from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from zenith.core.config import settings
from zenith.utils.logger import db_logger

db_url = settings.database_url
# Replace any escaped colons in the URL
if db_url:
    db_url = db_url.replace("\\x3a", ":")

db_logger.info(
    "Database configured",
    "CONFIG",
    environment=settings.ENVIRONMENT,
    backend=db_url.split(":", 1)[0] if db_url else "unset",
)

connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}

engine = create_engine(db_url, pool_pre_ping=True, echo=settings.DB_ECHO, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def enable_sqlite_foreign_keys(target_engine) -> None:
    """SQLite ignores FOREIGN KEY constraints unless asked per connection."""

    @event.listens_for(target_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


if db_url.startswith("sqlite"):
    enable_sqlite_foreign_keys(engine)


def get_db():
    """
    Dependency for database session.

    Yields:
        Session: Database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
