# o2o_shop/database.py
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

from o2o_shop.core.config import get_settings

settings = get_settings()

# ---------------------------------------------------------
# Engine setup
#
# - Postgres: enforce sslmode=require and validate pooled
#   connections before use (pool_pre_ping).
# - SQLite: allow use from FastAPI's threadpool; an in-memory
#   URL ("sqlite://") shares one connection via StaticPool.
# ---------------------------------------------------------

db_url = settings.DATABASE_URL

if db_url.startswith("sqlite"):
    engine_kwargs: dict = {"connect_args": {"check_same_thread": False}}
    if db_url in ("sqlite://", "sqlite:///:memory:"):
        engine_kwargs["poolclass"] = StaticPool
else:
    # Append sslmode=require if it is not already present
    if db_url.startswith("postgres") and "sslmode=" not in db_url:
        if "?" in db_url:
            db_url = db_url + "&sslmode=require"
        else:
            db_url = db_url + "?sslmode=require"
    engine_kwargs = {"pool_pre_ping": True}

engine = create_engine(db_url, echo=settings.DB_ECHO, **engine_kwargs)


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    The session is not committed here: write services own their
    transaction and call commit/rollback themselves.
    """
    with Session(engine) as session:
        yield session
