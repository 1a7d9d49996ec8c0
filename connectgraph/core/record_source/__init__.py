"""
Record source implementations for ConnectGraph.

Available backends:
- InMemoryRecordSource: dict-backed, for tests and ephemeral sessions
- SQLiteRecordSource: local aiosqlite database
"""

from connectgraph.core.record_source.base import RecordSource
from connectgraph.core.record_source.factory import RecordSourceFactory
from connectgraph.core.record_source.memory_source import InMemoryRecordSource
from connectgraph.core.record_source.sqlite_source import SQLiteRecordSource

__all__ = [
    "RecordSource",
    "RecordSourceFactory",
    "InMemoryRecordSource",
    "SQLiteRecordSource",
]
