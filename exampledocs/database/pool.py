"""Scoped connection pool for the examples database."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

logger = logging.getLogger(__name__)


@asynccontextmanager
async def open_pool(conninfo: str, max_size: int = 4) -> AsyncIterator[AsyncConnectionPool]:
    """
    Open a connection pool and close it on every exit path.

    Args:
        conninfo: libpq connection string or URL
        max_size: Maximum number of pooled connections

    Yields:
        An open AsyncConnectionPool whose connections return dict rows
    """
    pool = AsyncConnectionPool(
        conninfo,
        min_size=1,
        max_size=max_size,
        open=False,
        kwargs={"row_factory": dict_row},
    )
    await pool.open(wait=True)
    logger.debug(f"Opened connection pool for {conninfo}")
    try:
        yield pool
    finally:
        await pool.close()
        logger.debug("Closed connection pool")
