import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from sql_gateway.core.config import settings
from sql_gateway.core.counter import RequestCounter
from sql_gateway.core.database import engine, schema_engine
from sql_gateway.core.policy_check import run_policy_checks
from sql_gateway.core.provisioner import SchemaProvisioner
from sql_gateway.api.errors import register_exception_handlers
from sql_gateway.api.middleware import dispatch
from sql_gateway.api.router import api_router

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


# Close the engines once everything is done
@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.RUN_POLICY_CHECKS:
        try:
            await run_policy_checks(engine)
        except Exception as e:
            logger.error(f"Policy checks could not run: {e}")

    yield
    await engine.dispose()
    await schema_engine.dispose()


# Every path outside the sql routes is a 404, docs included
app = FastAPI(
    title="SQL Gateway",
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)

app.state.counter = RequestCounter()
app.state.provisioner = SchemaProvisioner(
    schema_engine, provision_once=settings.PROVISION_ONCE
)

app.middleware("http")(dispatch)
register_exception_handlers(app)

# Include the master router containing all our endpoints
app.include_router(api_router)
