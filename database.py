# database.py
"""
SQLAlchemy database connection and session management.

This module provides:
- Database engine configuration (Azure SQL by default, any SQLAlchemy URL via DATABASE_URL)
- Session factory for dependency injection
- Connection utilities

Usage:
     from database import get_session, engine

     # In FastAPI routes:
     @router.get("/apartments")
     def list_apartments(db: Session = Depends(get_session)):
          return db.query(Apartment).all()
     """
import logging
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from config import DATABASE_URL, SQL_ECHO

logger = logging.getLogger(__name__)


def build_engine(url: str, echo: bool = False) -> Engine:
     """
     Create an engine for the given URL.

     SQLite gets cross-thread access and foreign key enforcement so that the
     cascade/restrict rules behave the same as on the server.
     """
     if url.startswith("sqlite"):
          new_engine = create_engine(
               url,
               echo=echo,
               connect_args={"check_same_thread": False},
          )
          event.listen(new_engine, "connect", _enable_sqlite_foreign_keys)
          return new_engine

     return create_engine(
          url,
          pool_size=5,
          max_overflow=10,
          pool_timeout=30,
          pool_recycle=1800,  # Recycle connections after 30 minutes
          pool_pre_ping=True,
          echo=echo,
     )


def _enable_sqlite_foreign_keys(dbapi_conn, connection_record) -> None:
     cursor = dbapi_conn.cursor()
     cursor.execute("PRAGMA foreign_keys=ON")
     cursor.close()


# Create SQLAlchemy engine
engine = build_engine(DATABASE_URL, echo=SQL_ECHO)

# Session factory
SessionLocal = sessionmaker(
     bind=engine,
     autocommit=False,
     autoflush=False,
     expire_on_commit=False,
)


def get_session() -> Generator[Session, None, None]:
     """
     FastAPI dependency that provides a database session.

     The session is committed when the request handler returns normally and
     rolled back when it raises.

     Yields:
          Session: SQLAlchemy database session
     """
     session = SessionLocal()
     try:
          yield session
          session.commit()
     except Exception:
          session.rollback()
          raise
     finally:
          session.close()


def check_connection() -> bool:
     """
     Test database connectivity.

     Returns:
          bool: True if connection successful, False otherwise
     """
     try:
          with engine.connect() as conn:
               conn.execute(text("SELECT 1"))
          return True
     except Exception:
          logger.exception("Database connection check failed")
          return False
