import os
import tempfile

# Settings are read at import time, point both databases somewhere harmless.
# Tests never touch these engines, every fixture below builds its own.
_scratch = tempfile.gettempdir()
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{_scratch}/gateway_primary.db")
os.environ.setdefault("DATABASE_URL2", f"sqlite+aiosqlite:///{_scratch}/gateway_schema.db")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import create_async_engine

from sql_gateway.main import app
from sql_gateway.core.counter import RequestCounter
from sql_gateway.core.database import Base, get_db
from sql_gateway.core.provisioner import SchemaProvisioner


async def _table_names(engine):
    async with engine.connect() as conn:
        return await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())


# Lists the tables currently present on an engine
@pytest.fixture
def table_names():
    return _table_names


# Primary db, a fresh sqlite file for every test
@pytest_asyncio.fixture(scope="function")
async def primary_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'primary.db'}")
    yield engine
    await engine.dispose()


# Secondary db, the provisioner's own file
@pytest_asyncio.fixture(scope="function")
async def schema_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'schema.db'}")
    yield engine
    await engine.dispose()


# A database that can never be opened, the directory does not exist
@pytest_asyncio.fixture(scope="function")
async def broken_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'no' / 'such' / 'dir' / 'gateway.db'}"
    )
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def provisioner(schema_engine):
    return SchemaProvisioner(schema_engine)


# The patients table on the primary db, for the tests that insert/select rows
@pytest_asyncio.fixture(scope="function")
async def patients_table(primary_engine):
    async with primary_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# Client
@pytest_asyncio.fixture(scope="function")
async def client(primary_engine, provisioner):
    def override_get_db():
        return primary_engine

    app.dependency_overrides[get_db] = override_get_db
    original_state = (app.state.provisioner, app.state.counter)
    app.state.provisioner = provisioner
    app.state.counter = RequestCounter()

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
    app.state.provisioner, app.state.counter = original_state
