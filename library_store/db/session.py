from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from collections.abc import Generator
from library_store.core.config import settings
from library_store.models.base import Base


def build_engine(database_url: str) -> Engine:
    """
    Create an engine; SQLite connections are shared across the threadpool.
    """
    connect_args: dict[str, object] = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, pool_pre_ping=True, future=True, connect_args=connect_args)


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)


def init_db(bind: Engine | None = None) -> None:
    """Create the books table if it does not exist yet."""
    import library_store.models.book  # noqa: F401  registers Book

    Base.metadata.create_all(bind=bind or engine)


# Get a database session for the duration of one request.
def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
