import logging
from decimal import Decimal
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import DeclarativeBase

from foodapi.config import Config

logger = logging.getLogger(__name__)


# SQLAlchemy Base for ORM models
class Base(DeclarativeBase):
    pass


def get_async_url(url: str) -> str:
    """Convert database URL to async SQLAlchemy format."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    elif url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _configure_sqlite_connection(dbapi_connection, _connection_record):
    # Built-in LOWER() only folds ASCII
    dbapi_connection.create_function("lower", 1, _unicode_lower)
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _to_dicts(result) -> list[dict[str, Any]]:
    """Convert result rows to dicts with Decimal handling."""
    output = []
    for row in result.fetchall():
        row_dict = {}
        for key, value in row._mapping.items():
            row_dict[key] = float(value) if isinstance(value, Decimal) else value
        output.append(row_dict)
    return output


class Database:
    """Gateway for parameterized SQL against any SQLAlchemy-supported database."""

    def __init__(self, url: str | None = None):
        self.url = get_async_url(url or Config.DATABASE_URL)
        self.engine: AsyncEngine | None = None

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    async def connect(self):
        """Create database engine."""
        if self.engine:
            return
        self.engine = create_async_engine(self.url, echo=False)
        if self.is_sqlite:
            event.listen(self.engine.sync_engine, "connect", _configure_sqlite_connection)
        logger.info(f"Database engine created for {self.engine.url.render_as_string(hide_password=True)}")

    async def disconnect(self):
        """Close database engine."""
        if self.engine:
            await self.engine.dispose()
            self.engine = None

    async def create_tables(self):
        """Create all ORM tables that do not exist yet."""
        # Register the models on Base.metadata
        import foodapi.models  # noqa: F401

        if not self.engine:
            await self.connect()

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def execute_query(self, sql: str, params: dict | None = None) -> list[dict[str, Any]]:
        """Execute a SELECT query and return results as list of dicts.

        Args:
            sql: SQL query (use :param_name for parameterized queries)
            params: Optional dict of parameter values
        """
        if not self.engine:
            await self.connect()

        async with self.engine.connect() as conn:
            result = await conn.execute(text(sql), params or {})
            return _to_dicts(result)

    async def execute(self, sql: str, params: dict | None = None) -> list[dict[str, Any]]:
        """Execute a write (INSERT, UPDATE, DELETE) in its own transaction.

        Returns the rows of a RETURNING clause, or an empty list.
        """
        if not self.engine:
            await self.connect()

        async with self.engine.begin() as conn:
            result = await conn.execute(text(sql), params or {})
            if result.returns_rows:
                return _to_dicts(result)
            return []


db = Database()


def get_database() -> Database:
    """FastAPI dependency for the shared gateway."""
    return db
