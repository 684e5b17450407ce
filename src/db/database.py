"""Generate database session"""

from typing import Generator, Optional

from sqlalchemy import Engine, StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import Settings, get_settings
from src.db.schema import Base


def create_db_engine(settings: Optional[Settings] = None) -> Engine:
    """Engine for the configured URL. Tables are created if they do not exist yet."""
    settings = settings or get_settings()
    if settings.database_url.startswith("sqlite") and ":memory:" in settings.database_url:
        # a single shared connection, otherwise every session gets its own (empty) in-memory database
        engine = create_engine(
            settings.database_url,
            echo=settings.echo_sql,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(settings.database_url, echo=settings.echo_sql)

    # Ensure all tables are created
    Base.metadata.create_all(bind=engine)
    return engine


def create_session_factory(settings: Optional[Settings] = None) -> sessionmaker[Session]:
    return sessionmaker(bind=create_db_engine(settings))


def get_db(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
