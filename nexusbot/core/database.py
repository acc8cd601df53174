"""
Process-wide MongoDB connection
"""

from typing import Optional

import motor.motor_asyncio

from ..utils.errors import ConfigurationError
from .logging import get_logger


class DatabaseManager:
    """
    Owns the motor client and its connection pool
    """

    def __init__(self, uri: str, name: str):
        self.uri = uri
        self.name = name
        self.client: Optional[motor.motor_asyncio.AsyncIOMotorClient] = None
        self.db: Optional[motor.motor_asyncio.AsyncIOMotorDatabase] = None
        self.logger = get_logger("database")

    async def connect(self, settings):
        """Connect to the database"""
        try:
            self.client = motor.motor_asyncio.AsyncIOMotorClient(
                self.uri,
                serverSelectionTimeoutMS=settings.server_selection_timeout,
                connectTimeoutMS=settings.connection_timeout,
                maxPoolSize=settings.max_pool_size,
                minPoolSize=settings.min_pool_size,
            )

            # Test connection
            await self.client.admin.command("ping")

            self.db = self.client[self.name]
            self.logger.info("Successfully connected to database")

        except Exception as e:
            self.logger.error(f"Failed to connect to database: {e}")
            self._discard_client()
            raise
        except BaseException:
            # Cancelled, e.g. by a startup timeout; the pool must not outlive it
            self.logger.warning("Database connection attempt cancelled")
            self._discard_client()
            raise

    def _discard_client(self):
        if self.client is not None:
            self.client.close()
            self.client = None

    async def close(self):
        """Close database connection"""
        if self.client:
            self.client.close()
            self.client = None
            self.db = None
            self.logger.info("Database connection closed")


_manager: Optional[DatabaseManager] = None


async def initialize_database(config) -> DatabaseManager:
    """Connect the process-wide database handle described by ``config``"""
    global _manager

    if not config.database.uri:
        raise ConfigurationError("MONGO_URI is not set")

    if _manager is not None and _manager.client is not None:
        return _manager

    manager = DatabaseManager(config.database.uri, config.database.name)
    await manager.connect(config.database)
    _manager = manager
    return manager


def get_database():
    """The connected database, or ``None`` before initialization"""
    return _manager.db if _manager is not None else None


async def close_database():
    global _manager

    if _manager is not None:
        await _manager.close()
        _manager = None
