# shopapi/database/database.py
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from ..config import Config
from .entities import Base


class Database:
    """Owns the async engine and hands out sessions"""

    def __init__(self, url: Optional[str] = None):
        self.url = url or Config.DATABASE_URL
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self.logger = logging.getLogger(__name__)

    async def connect(self):
        """Create the engine and the schema"""
        try:
            self.engine = create_async_engine(self.url, echo=Config.DB_ECHO, **self._engine_options())
            self.session_factory = async_sessionmaker(self.engine, expire_on_commit=False)

            await self._create_schema()

            self.logger.info("database connection established")
        except Exception as e:
            self.logger.error(f"failed to connect to database: {e}")
            raise

    async def close(self):
        """Dispose the engine"""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None
            self.logger.info("database connection closed")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Session running in one transaction, committed on success"""
        if self.session_factory is None:
            raise RuntimeError("database is not connected")

        async with self.session_factory() as session:
            async with session.begin():
                yield session

    def _engine_options(self) -> dict:
        if self.url.startswith("sqlite"):
            # in-memory sqlite lives in a single connection
            return {
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            }
        return {
            "pool_size": Config.DB_POOL_SIZE,
            "pool_pre_ping": True,
        }

    async def _create_schema(self):
        """Create missing tables"""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            self.logger.info("database schema is up to date")
        except Exception as e:
            self.logger.error(f"failed to create database schema: {e}")
            raise
