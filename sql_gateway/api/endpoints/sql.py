import logging
from typing import Annotated, Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncEngine

from sql_gateway.core import executor, schemas
from sql_gateway.core.database import get_db

router = APIRouter(prefix="/api/v1", tags=["SQL"])

logger = logging.getLogger(__name__)

engine_dep = Annotated[AsyncEngine, Depends(get_db)]


def request_message(request: Request) -> str:
    return f"Request #{request.state.request_number}"


async def run_query(engine: AsyncEngine, query: str) -> List[Dict[str, Any]]:
    logger.info(f"Executing: {query}")
    try:
        return await executor.execute_query(engine, query)
    except executor.QueryExecutionError as error:
        # The database's message goes back untouched
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, error.message)


@router.get("/sql", response_model=schemas.SqlQueryResponse)
async def query_sql(request: Request, engine: engine_dep, query: Optional[str] = None):
    """Run the `query` url parameter as-is and return the rows."""
    if not query:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Query parameter is required")

    rows = await run_query(engine, query)
    return {"message": request_message(request), "data": rows}


@router.post("/sql", response_model=schemas.SqlExecuteResponse)
async def execute_sql(request: Request, engine: engine_dep):
    """
    Run the `query` field of a JSON body as-is.
    The body is read manually so bad input is a 400, not the framework's 422.
    """
    body = b""
    async for chunk in request.stream():
        body += chunk

    try:
        payload = schemas.SqlRequest.model_validate_json(body)
    except ValidationError as error:
        if any(e["type"] == "json_invalid" for e in error.errors()):
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Invalid JSON body")
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Query is required")

    rows = await run_query(engine, payload.query)
    return {
        "message": request_message(request),
        "result": "Query executed successfully",
        "data": rows,
    }
