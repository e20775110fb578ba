"""
Application startup and shutdown.
Ensures tables exist in development and database connections are released on exit.
"""

import logging
from contextlib import asynccontextmanager

from app.core.config import settings

logger = logging.getLogger("employee_directory.shutdown")


@asynccontextmanager
async def lifespan_manager(app):
    """
    FastAPI lifespan context manager for startup/shutdown.

    Usage:
        app = FastAPI(lifespan=lifespan_manager)
    """
    from app.db.session import create_tables, engine

    logger.info("Application starting up...")

    if settings.DB_CREATE_TABLES:
        await create_tables()

    logger.info("Application startup complete")

    try:
        yield
    finally:
        logger.info("Application shutting down...")
        logger.info("Closing database connections...")
        await engine.dispose()
        logger.info("Database connections closed")
