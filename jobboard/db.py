"""
Neo4j driver management for the job record store.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from neo4j import AsyncDriver, AsyncGraphDatabase
from neo4j.exceptions import Neo4jError, DriverError

from .config import get_settings

logger = logging.getLogger(__name__)

_driver: AsyncDriver | None = None

CONSTRAINTS = (
    "CREATE CONSTRAINT job_id IF NOT EXISTS FOR (j:Job) REQUIRE j.id IS UNIQUE",
    "CREATE CONSTRAINT account_username IF NOT EXISTS "
    "FOR (a:Account) REQUIRE a.username IS UNIQUE",
    "CREATE CONSTRAINT session_token IF NOT EXISTS "
    "FOR (s:Session) REQUIRE s.token IS UNIQUE",
)


class StoreUnavailableError(RuntimeError):
    """Raised when the document store cannot be reached."""


def get_driver() -> AsyncDriver:
    """
    Lazily create and cache the Neo4j async driver.
    """
    global _driver  # noqa: PLW0603
    if _driver is None:
        settings = get_settings()
        _driver = AsyncGraphDatabase.driver(
            settings.neo4j_uri,
            auth=(settings.neo4j_user, settings.neo4j_password),
        )
    return _driver


async def close_driver() -> None:
    """Close the cached driver, if any."""
    global _driver  # noqa: PLW0603
    if _driver is not None:
        await _driver.close()
        _driver = None


@asynccontextmanager
async def neo4j_session() -> AsyncIterator:
    """
    Provide an async Neo4j session as a context manager.
    """
    driver = get_driver()
    async with driver.session() as session:
        yield session


async def verify_connectivity() -> None:
    """
    Check that the store answers; raise StoreUnavailableError otherwise.
    """
    settings = get_settings()
    try:
        await get_driver().verify_connectivity()
    except (DriverError, Neo4jError, OSError) as exc:
        raise StoreUnavailableError(
            f"Cannot reach Neo4j at {settings.neo4j_uri}: {exc}"
        ) from exc
    logger.info("Connected to Neo4j at %s", settings.neo4j_uri)


async def ensure_constraints() -> None:
    """Create the uniqueness constraints the store relies on."""
    async with neo4j_session() as session:
        for statement in CONSTRAINTS:
            result = await session.run(statement)
            await result.consume()
