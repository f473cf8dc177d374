from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import DeclarativeBase

from sql_gateway.core.config import settings

# Primary engine: every client query goes here and nowhere else
engine = create_async_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)

# Secondary engine: only the schema provisioner talks to it
schema_engine = create_async_engine(settings.DATABASE_URL2, echo=settings.SQL_ECHO)


# This is the "Bridge" that gives the sql routes the primary engine.
# No connection is taken here, the executor checks one out once the input is valid
def get_db() -> AsyncEngine:
    return engine


# All the provisioned tables are "stored" in the Base class
class Base(DeclarativeBase):
    pass
