"""Fixtures for record source tests.

Contract tests use the shared `any_source` fixture so they run against
both backends.
"""

from collections.abc import AsyncGenerator

import pytest

from connectgraph.core.record_source import SQLiteRecordSource


@pytest.fixture
async def sqlite_source(tmp_path) -> AsyncGenerator[SQLiteRecordSource, None]:
    """SQLite record source on a temporary database file."""
    record_source = SQLiteRecordSource(db_path=str(tmp_path / "graph.db"))
    await record_source.initialize()
    yield record_source
    await record_source.close()
