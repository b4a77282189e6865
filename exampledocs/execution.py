"""
Default query-execution engine.

Runs example SQL against the examples database with the search path set to
the schemas exposed by the schema handle.
"""

import logging
from typing import Any, Dict, Optional

from psycopg import sql

logger = logging.getLogger(__name__)


class SqlQueryEngine:
    """Execute example sources against the shared connection pool."""

    def __init__(self, pool):
        self.pool = pool

    async def execute(
        self,
        schema: Any,
        source: str,
        variables: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Execute a source text in a single transaction.

        Args:
            schema: Schema handle; its ``exposed_schemas`` become the search path
            source: SQL text to run
            variables: Named parameters for the statement

        Returns:
            ``{"data": [...]}`` with the rows of the last statement that
            produced a result set, as dicts
        """
        search_path = list(getattr(schema, "exposed_schemas", None) or [])

        async with self.pool.connection() as conn:
            async with conn.transaction():
                if search_path:
                    await conn.execute(
                        sql.SQL("set local search_path to {}").format(
                            sql.SQL(", ").join(sql.Identifier(name) for name in search_path)
                        )
                    )
                cursor = await conn.execute(source, variables)
                rows = []
                # A multi-statement source yields one result per statement
                while True:
                    if cursor.description:
                        rows = await cursor.fetchall()
                    if not cursor.nextset():
                        break

        logger.debug(f"Query returned {len(rows)} rows")
        return {"data": rows}
