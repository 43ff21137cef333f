"""
Database connection management module
"""
from sqlalchemy import create_engine, Engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session, scoped_session
from sqlalchemy.pool import QueuePool, StaticPool
from contextlib import contextmanager
from typing import Generator
from config.settings import settings
from caseflow.utils.exceptions import DatabaseError
from caseflow.utils.logger import get_logger

logger = get_logger(__name__)


def _engine_options(database_url: str) -> dict:
    """
    Engine options for the configured backend

    Args:
        database_url: SQLAlchemy database URL

    Returns:
        keyword arguments for create_engine
    """
    if database_url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        # An in-memory database only exists on its single connection
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options

    return {
        "poolclass": QueuePool,
        "pool_size": 5,
        "max_overflow": 10,
        "pool_pre_ping": True,  # check connections before use
    }


class DatabaseManager:
    """Database connection manager"""

    def __init__(self, database_url: str = None):
        self.database_url = database_url or settings.database_url
        self.engine: Engine = None
        self.session_factory: sessionmaker = None
        self.SessionLocal: scoped_session = None
        self._initialize()

    def _initialize(self):
        """Initialise the database connection"""
        try:
            self.engine = create_engine(
                self.database_url,
                echo=False,  # SQL logging (True while debugging)
                **_engine_options(self.database_url),
            )

            self.session_factory = sessionmaker(
                autocommit=False,
                autoflush=False,
                bind=self.engine
            )
            self.SessionLocal = scoped_session(self.session_factory)

            logger.info("Database connection initialised")
        except Exception as e:
            logger.error(f"Database connection initialisation failed: {str(e)}")
            raise

    def get_session(self) -> Session:
        """
        Get a database session

        Returns:
            Session instance
        """
        return self.SessionLocal()

    @contextmanager
    def get_db_session(self) -> Generator[Session, None, None]:
        """
        Get a database session through a context manager

        Yields:
            Session instance

        Raises:
            DatabaseError: a SQLAlchemy error inside the block or on commit

        Example:
            with db_manager.get_db_session() as session:
                # work with the session
                pass
        """
        session = self.get_session()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Database session error: {str(e)}")
            raise DatabaseError(str(e)) from e
        except Exception as e:
            session.rollback()
            logger.error(f"Database session error: {str(e)}")
            raise
        finally:
            session.close()
            self.SessionLocal.remove()

    def create_tables(self):
        """Create every table known to the model metadata"""
        # Import registers the models on the metadata
        from caseflow.db import models  # noqa: F401
        from caseflow.db.base import Base

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables created")

    def drop_tables(self):
        """Drop every table known to the model metadata"""
        from caseflow.db import models  # noqa: F401
        from caseflow.db.base import Base

        Base.metadata.drop_all(bind=self.engine)
        logger.info("Database tables dropped")

    def health_check(self) -> bool:
        """
        Check the database connection

        Returns:
            connection state (True: healthy, False: error)
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.debug("Database connection: healthy")
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {str(e)}")
            return False

    def close(self):
        """Close the database connection"""
        if self.engine:
            self.engine.dispose()
            logger.info("Database connection closed")


# Global database manager instance
db_manager = DatabaseManager()


def get_db() -> Generator[Session, None, None]:
    """
    Database session generator for FastAPI dependency injection

    Yields:
        Session instance

    Raises:
        DatabaseError: a SQLAlchemy error escaped the request
    """
    session = db_manager.session_factory()
    try:
        yield session
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Database error during request: {str(e)}")
        raise DatabaseError(str(e)) from e
    finally:
        session.close()
