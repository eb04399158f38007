import logging
import os

from dotenv import load_dotenv
from sqlalchemy import event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, Session, create_engine

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_DB_URL = "sqlite:///./repflow.db"
ENVIRONMENT = os.getenv("ENV", "development").lower()

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    if ENVIRONMENT == "production":
        raise RuntimeError(
            "DATABASE_URL is required in production. Set it to your PostgreSQL connection string."
        )
    DATABASE_URL = DEFAULT_DB_URL

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(
    DATABASE_URL,
    echo=os.getenv("SQL_ECHO", "false").lower() == "true",
    connect_args=connect_args,
)


# SQLite only enforces the exercise -> workout -> user chain with this pragma
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, _):
    if type(dbapi_conn).__module__.startswith("sqlite3"):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON;")
        cursor.close()


def init_db() -> None:
    """Create missing tables. A database that cannot be reached stops the process."""
    safe_url = make_url(DATABASE_URL).render_as_string(hide_password=True)
    logger.info("Initialising database at %s (env=%s)", safe_url, ENVIRONMENT)
    try:
        from . import models  # noqa: F401
        SQLModel.metadata.create_all(engine)
    except SQLAlchemyError:
        logger.exception("Database initialisation failed for %s", safe_url)
        raise SystemExit(1)
    logger.info("Database ready")


def get_session():
    with Session(engine) as session:
        yield session
