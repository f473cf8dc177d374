import logging
from typing import List, NamedTuple, Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from sql_gateway.core.executor import driver_message
from sql_gateway.core.models import Patient
from sql_gateway.core.schemas import PolicyCheckResult

# -----------------------------------------------------------------------------
# POLICY CHECK MODULE - Startup diagnostic
# Purpose: confirm the primary role may SELECT and INSERT but nothing else
# The gateway itself never filters SQL, so this is the only place the policy is
# looked at from our side. Every probe is rolled back.
# -----------------------------------------------------------------------------

logger = logging.getLogger(__name__)

PROBE_TABLE = "policy_check_probe"
TABLE = Patient.__tablename__


class PolicyProbe(NamedTuple):
    name: str
    statement: str
    expected_allowed: bool
    setup: Optional[str] = None


PROBES = [
    PolicyProbe(
        "INSERT",
        f"INSERT INTO {TABLE} (name, dateofbirth) VALUES ('Arthur Dent', '1978-03-15')",
        True,
    ),
    PolicyProbe("SELECT", f"SELECT * FROM {TABLE}", True),
    PolicyProbe("DELETE", f"DELETE FROM {TABLE} WHERE 1 = 0", False),
    PolicyProbe("UPDATE", f"UPDATE {TABLE} SET name = name WHERE 1 = 0", False),
    PolicyProbe("CREATE TABLE", f"CREATE TABLE {PROBE_TABLE} (id INTEGER)", False),
    PolicyProbe(
        "DROP TABLE",
        f"DROP TABLE {PROBE_TABLE}",
        False,
        setup=f"CREATE TABLE IF NOT EXISTS {PROBE_TABLE} (id INTEGER)",
    ),
]


async def _run_probe(engine: AsyncEngine, probe: PolicyProbe) -> PolicyCheckResult:
    allowed, error = True, None
    async with engine.connect() as conn:
        try:
            if probe.setup:
                try:
                    await conn.exec_driver_sql(probe.setup)
                except Exception as exc:
                    # The probe cannot say anything about its own statement
                    allowed, error = None, f"setup failed: {driver_message(exc)}"
            if allowed:
                try:
                    await conn.exec_driver_sql(probe.statement)
                except Exception as exc:
                    allowed, error = False, driver_message(exc)
        finally:
            await conn.rollback()

    return PolicyCheckResult(
        name=probe.name,
        statement=probe.statement,
        expected_allowed=probe.expected_allowed,
        allowed=allowed,
        error=error,
    )


async def run_policy_checks(
    engine: AsyncEngine, probes: List[PolicyProbe] = PROBES
) -> List[PolicyCheckResult]:
    """
    Try each statement kind against the primary database and report
    whether the role allowed it.

    Args:
        engine: The primary engine (the one client queries run on).
        probes: Statements to try, defaults to the SELECT/INSERT-only policy.

    Returns:
        One result per probe, in order. Never raises for a refused statement.
    """
    logger.info("Running role policy checks...")
    results = []

    for probe in probes:
        result = await _run_probe(engine, probe)
        results.append(result)

        if result.inconclusive:
            logger.warning(f"{probe.name}: inconclusive ({result.error})")
            continue

        verdict = "allowed" if result.allowed else f"blocked ({result.error})"
        if result.passed:
            logger.info(f"{probe.name}: {verdict} as expected")
        else:
            logger.warning(f"{probe.name}: {verdict}, policy violation")

    failed = [r.name for r in results if not r.passed and not r.inconclusive]
    unknown = [r.name for r in results if r.inconclusive]
    if unknown:
        logger.warning(f"Policy checks could not decide: {', '.join(unknown)}")
    if failed:
        logger.warning(f"Policy checks completed with violations: {', '.join(failed)}")
    elif not unknown:
        logger.info("Policy checks completed, role is SELECT/INSERT only")
    return results
