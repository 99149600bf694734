"""
ERP Database Configuration
SQLAlchemy setup for PostgreSQL (production) and SQLite (development, tests)
"""
from sqlalchemy import create_engine, event, MetaData, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from typing import Generator
import logging

from .config import settings

logger = logging.getLogger("erp.database")


def configure_sqlite_locking(engine: Engine) -> Engine:
    """
    Make every SQLite transaction take the database write lock up front.

    pysqlite defers BEGIN until the first write, so two sessions can read the
    same stock figures before either writes. BEGIN IMMEDIATE serialises whole
    units of work, which is what SELECT ... FOR UPDATE gives us on PostgreSQL.
    """
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def create_db_engine(database_url: str, **kwargs) -> Engine:
    """Create an engine with the pool and locking setup the URL's backend needs"""
    if database_url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        connect_args.setdefault("timeout", settings.SQLITE_BUSY_TIMEOUT)
        engine = create_engine(
            database_url,
            connect_args=connect_args,
            echo=settings.DATABASE_ECHO,
            **kwargs
        )
        return configure_sqlite_locking(engine)

    kwargs.setdefault("pool_size", settings.DATABASE_POOL_SIZE)
    kwargs.setdefault("max_overflow", settings.DATABASE_MAX_OVERFLOW)
    return create_engine(
        database_url,
        pool_recycle=3600,  # Recycle connections after 1 hour
        pool_pre_ping=True,  # Validate connections before use
        echo=settings.DATABASE_ECHO,
        **kwargs
    )


engine = create_db_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

# Metadata with naming convention for constraints
Base = declarative_base(metadata=MetaData(naming_convention={
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}))


def get_db() -> Generator:
    """
    Dependency function to get database session

    Yields:
        Database session
    """
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"Database session error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


def init_db(bind: Engine = None):
    """
    Initialize database tables

    This function creates all tables defined in models
    """
    # Import all models to ensure they are registered with Base
    from app.models import company, equipment  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables created successfully")


def check_db_connection(db) -> bool:
    """
    Check if database connection is working

    Returns:
        True if connection is successful, False otherwise
    """
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False
