import logging
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)


class QueryExecutionError(Exception):
    """The database refused or failed the query. `message` is the driver's own text."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def driver_message(error: Exception) -> str:
    # DBAPIError wraps the driver exception, its text is what the client should see
    orig = getattr(error, "orig", None)
    return str(orig) if orig is not None else str(error)


async def execute_query(engine: AsyncEngine, query: str) -> List[Dict[str, Any]]:
    """
    Run the raw query on the primary database and return every row.

    The text goes straight to the driver (no bind parameter parsing),
    so whatever the client sent is exactly what the database sees.
    Connecting is part of the execution: a database that cannot be
    reached fails the same way a bad query does.
    """
    try:
        # Commits on the way out so permitted writes (INSERT) stick, rolls back on error
        async with engine.begin() as conn:
            result = await conn.exec_driver_sql(query)
            rows = [dict(row._mapping) for row in result] if result.returns_rows else []
    except SQLAlchemyError as error:
        message = driver_message(error)
        logger.error(f"Query failed: {message}")
        raise QueryExecutionError(message) from error
    return rows
