from dataclasses import dataclass
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from fastapi import Request
from typing import Generator

from .config import Settings
from .security import TokenService

Base = declarative_base()


@dataclass
class AppContext:
    """Process-wide resources, built once at startup and held for the app's lifetime."""
    settings: Settings
    engine: Engine
    session_factory: sessionmaker
    token_service: TokenService


def create_db_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        # Sessions are opened in FastAPI's threadpool
        return create_engine(database_url, connect_args={"check_same_thread": False})

    return create_engine(
        database_url,
        pool_size=5,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=1800,  # Recycle connections after 30 minutes
    )


def build_context(settings: Settings) -> AppContext:
    engine = create_db_engine(settings.get_database_url)
    return AppContext(
        settings=settings,
        engine=engine,
        session_factory=sessionmaker(autocommit=False, autoflush=False, bind=engine),
        token_service=TokenService(
            secret_key=settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
            expire_hours=settings.ACCESS_TOKEN_EXPIRE_HOURS,
        ),
    )


def get_context(request: Request) -> AppContext:
    return request.app.state.context


# Database dependency
def get_db(request: Request) -> Generator[Session, None, None]:
    """Get database session."""
    db = get_context(request).session_factory()
    try:
        yield db
    finally:
        db.close()


# Database initialization
def init_db(engine: Engine):
    """Initialize database tables."""
    # Register the mapped classes on Base.metadata
    from ..models import appointment, user  # noqa: F401

    Base.metadata.create_all(bind=engine)
