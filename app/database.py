import os
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from dotenv import load_dotenv

load_dotenv()

Base = declarative_base()


def get_database_url() -> Optional[str]:
    """Get database URL from environment, or None to run in memory."""
    url = os.getenv("DATABASE_URL")
    if not url:
        return None
    # Ensure psycopg (v3) driver is used
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+psycopg://", 1)
    elif url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+psycopg://", 1)
    return url


def get_engine(url: Optional[str] = None):
    """Create a database engine for the given URL (defaults to DATABASE_URL)."""
    url = url or get_database_url()
    if not url:
        raise RuntimeError("DATABASE_URL is not set")

    kwargs = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        # A memory database only lives as long as its single connection
        if ":memory:" in url or url in ("sqlite://", "sqlite+pysqlite://"):
            kwargs["poolclass"] = StaticPool

    return create_engine(url, echo=os.getenv("DEBUG", "false").lower() == "true", **kwargs)


def create_session_factory(engine):
    """Session factory whose objects stay readable after commit."""
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def init_db(engine) -> None:
    """Create any missing tables. Alembic owns schema changes after the baseline."""
    import app.models  # noqa: F401  (register tables on Base.metadata)

    Base.metadata.create_all(bind=engine)
