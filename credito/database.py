"""
Database connection and session management.

Each directory service owns its tables and points DATABASE_URL at its own
database; the evaluator never opens a session.
"""
from typing import Sequence

from sqlalchemy import Table, create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from credito.config import settings

engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,  # Enable connection health checks
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def create_tables(tables: Sequence[Table]) -> None:
    """Create the given tables if missing (in production, use migrations)."""
    Base.metadata.create_all(bind=engine, tables=list(tables))


def get_db():
    """Dependency that provides a database session, closed after the request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
