from __future__ import annotations

import logging
from typing import List, Union

import sqlalchemy as sa
from sqlalchemy.engine import URL, RowMapping
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.schema import CreateTable

from .models import TaskEntity
from .repositories import StorageError, TaskRepository
from .schemas import TaskCreate
from .settings import DatabaseSettings

logger = logging.getLogger(__name__)

HEALTH_CHECK_QUERY = "SELECT 1 + 1 AS solution"

metadata = sa.MetaData()

tasks = sa.Table(
    "tasks",
    metadata,
    sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
    sa.Column("title", sa.String(255), nullable=False),
    sa.Column("description", sa.Text, nullable=True),
    sa.Column("created_at", sa.TIMESTAMP, server_default=sa.func.current_timestamp()),
    # ids are never reused on SQLite either
    sqlite_autoincrement=True,
)


class DatabaseInitError(RuntimeError):
    """Raised when the pool cannot be opened, verified, or bootstrapped."""


class Database:
    """
    Owner of the shared connection pool.

    Callers never check out connections directly; the repository runs each
    statement on a pooled connection that is returned when the statement ends.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def check(self) -> None:
        """Run a trivial computation to confirm the pool answers correctly."""
        async with self._engine.connect() as conn:
            result = await conn.execute(sa.text(HEALTH_CHECK_QUERY))
            solution = result.scalar_one()
        if solution != 2:
            raise DatabaseInitError(f"Unexpected health check answer: {solution!r}")
        logger.info("Database check: The answer to 1 + 1 is: %s", solution)

    async def close(self) -> None:
        await self._engine.dispose()


def engine_url(config: DatabaseSettings) -> Union[URL, str]:
    if config.url:
        return config.url
    return URL.create(
        "mysql+aiomysql",
        username=config.user,
        password=config.password,
        host=config.host,
        port=config.port,
        database=config.database,
    )


def create_engine(config: DatabaseSettings) -> AsyncEngine:
    # max_overflow=0 keeps the pool strictly bounded; pool_timeout=None lets
    # excess requests queue without limit.
    return create_async_engine(
        engine_url(config),
        pool_size=config.connection_limit,
        max_overflow=0,
        pool_timeout=config.pool_timeout,
    )


async def create_schema(database: Database) -> None:
    """Create the tasks table if it does not already exist."""
    async with database.engine.begin() as conn:
        await conn.execute(CreateTable(tasks, if_not_exists=True))
    logger.info("Database table '%s' checked/created.", tasks.name)


# PUBLIC_INTERFACE
async def init_database(config: DatabaseSettings) -> Database:
    """
    Open the connection pool, verify it and ensure the schema exists.

    Raises:
        DatabaseInitError: if building the engine (bad URL, unknown driver,
        rejected pool options), connecting, the health check or the table
        bootstrap fails. The pool is disposed before the error propagates;
        no retry is attempted.
    """
    try:
        engine = create_engine(config)
    except (SQLAlchemyError, TypeError, ImportError) as e:
        raise DatabaseInitError(f"Failed to create database pool: {e}") from e

    database = Database(engine)
    try:
        await database.check()
        await create_schema(database)
    except DatabaseInitError:
        await database.close()
        raise
    except (SQLAlchemyError, OSError) as e:
        await database.close()
        raise DatabaseInitError(f"Failed to initialize database connection or setup: {e}") from e
    logger.info("Successfully connected to database pool.")
    return database


def _row_to_entity(row: RowMapping) -> TaskEntity:
    return {
        "id": int(row["id"]),
        "title": str(row["title"]),
        "description": row["description"],
        "created_at": row["created_at"],
    }


class SQLTaskRepository(TaskRepository):
    """
    Relational repository running one autonomous statement per call on the
    shared pool.
    """

    def __init__(self, database: Database) -> None:
        self._database = database

    async def create(self, data: TaskCreate) -> int:
        # title and description travel as bound parameters
        stmt = sa.insert(tasks).values(title=data.title, description=data.description)
        try:
            async with self._database.engine.begin() as conn:
                result = await conn.execute(stmt)
                new_id = result.inserted_primary_key[0]
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
        return int(new_id)

    async def list(self) -> List[TaskEntity]:
        stmt = sa.select(tasks).order_by(tasks.c.created_at.desc(), tasks.c.id.desc())
        try:
            async with self._database.engine.connect() as conn:
                rows = (await conn.execute(stmt)).mappings().all()
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
        return [_row_to_entity(r) for r in rows]
