import pytest

from sql_gateway.core.executor import QueryExecutionError, execute_query


@pytest.mark.asyncio
async def test_select_returns_rows(primary_engine):
    rows = await execute_query(
        primary_engine, "SELECT 1 AS a UNION ALL SELECT 2 ORDER BY a"
    )

    assert rows == [{"a": 1}, {"a": 2}]


@pytest.mark.asyncio
async def test_query_text_is_not_rewritten(primary_engine):
    """Colons and percent signs reach the database as typed"""
    rows = await execute_query(
        primary_engine, "SELECT '12:30' AS t, ':name' AS n, '100%' AS p"
    )

    assert rows == [{"t": "12:30", "n": ":name", "p": "100%"}]


@pytest.mark.asyncio
async def test_insert_is_committed(primary_engine, patients_table):
    rows = await execute_query(
        primary_engine,
        "INSERT INTO patients (name, dateofbirth) VALUES ('Arthur Dent', '1978-03-15')",
    )
    assert rows == []

    # A later call on a fresh connection sees the row
    rows = await execute_query(primary_engine, "SELECT name FROM patients")
    assert rows == [{"name": "Arthur Dent"}]


@pytest.mark.asyncio
async def test_failure_carries_driver_message(primary_engine):
    with pytest.raises(QueryExecutionError) as exc_info:
        await execute_query(primary_engine, "SELECT * FROM nowhere")

    assert exc_info.value.message == "no such table: nowhere"

    # The engine is still usable after the failure
    assert await execute_query(primary_engine, "SELECT 1 AS ok") == [{"ok": 1}]


@pytest.mark.asyncio
async def test_unreachable_database_is_execution_error(broken_engine):
    """Failing to connect is reported like any other database failure"""
    with pytest.raises(QueryExecutionError) as exc_info:
        await execute_query(broken_engine, "SELECT 1")

    assert exc_info.value.message == "unable to open database file"


@pytest.mark.asyncio
async def test_failed_insert_leaves_nothing_behind(primary_engine, patients_table):
    """NOT NULL violation is an execution error and nothing is written"""
    with pytest.raises(QueryExecutionError) as exc_info:
        await execute_query(primary_engine, "INSERT INTO patients (name) VALUES ('Zaphod')")
    assert "NOT NULL" in exc_info.value.message

    assert await execute_query(primary_engine, "SELECT * FROM patients") == []
