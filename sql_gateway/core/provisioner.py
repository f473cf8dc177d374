import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine

from sql_gateway.core.database import Base
from sql_gateway.core.models import Patient

logger = logging.getLogger(__name__)


class SchemaProvisioner:
    """
    Makes sure the patients table exists on the secondary database.

    The probe is a zero-row select; any failure of it triggers a
    create-if-missing of the whole metadata. Provisioning is best-effort:
    a failed creation is logged and suppressed so the request that
    triggered it still goes through.
    """

    def __init__(self, engine: AsyncEngine, provision_once: bool = True):
        self.engine = engine
        self.provision_once = provision_once
        self.provisioned = False
        self._lock = asyncio.Lock()

    async def _probe(self):
        async with self.engine.connect() as conn:
            await conn.execute(select(Patient).limit(0))

    async def _create(self):
        # checkfirst is on by default, so an existing table is never recreated
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ensure_schema(self) -> bool:
        """Return True when the table is known to be present."""
        if self.provisioned and self.provision_once:
            return True

        # Only one coroutine probes/creates at a time, the rest wait and reuse the flag
        async with self._lock:
            if self.provisioned and self.provision_once:
                return True

            try:
                await self._probe()
            except Exception as error:
                logger.warning(
                    f"Probe of '{Patient.__tablename__}' failed, creating it: {error}"
                )
                try:
                    await self._create()
                except Exception:
                    logger.exception(
                        f"Could not create '{Patient.__tablename__}', "
                        "suppressing and continuing with the request"
                    )
                    return False
                logger.info(f"Created table '{Patient.__tablename__}'")

            self.provisioned = True
            return True
