"""Shared fixtures for ConnectGraph tests.

Fixtures use function scope so every test gets a fresh record source and
its own event loop resources.
"""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

import pytest

from connectgraph.config import Config, LoggingConfig
from connectgraph.core.record_source import (
    InMemoryRecordSource,
    RecordSource,
    SQLiteRecordSource,
)
from connectgraph.models import Connection, Content, EntityKind, Memo, Tag
from connectgraph.services import ConnectionStore, KnowledgeGraphService


def build_connection(
    source_id: str,
    target_id: str,
    relationship: str = "related",
    strength: int = 5,
    source_type: EntityKind = EntityKind.CONTENT,
    target_type: EntityKind = EntityKind.CONTENT,
    age_seconds: int = 0,
) -> Connection:
    """Build a connection with an explicit age (older = larger age_seconds)."""
    return Connection(
        source_id=source_id,
        target_id=target_id,
        source_type=source_type,
        target_type=target_type,
        relationship=relationship,
        strength=strength,
        created_at=datetime.now(UTC) - timedelta(seconds=age_seconds),
    )


@pytest.fixture
def make_connection():
    """Factory for connections with controllable age."""
    return build_connection


@pytest.fixture
def test_config() -> Config:
    """Default config with file logging disabled."""
    return Config(logging=LoggingConfig(log_to_file=False))


@pytest.fixture
async def source() -> AsyncGenerator[InMemoryRecordSource, None]:
    """Initialized, empty in-memory record source."""
    record_source = InMemoryRecordSource()
    await record_source.initialize()
    yield record_source
    await record_source.close()


@pytest.fixture(params=["memory", "sqlite"])
async def any_source(request, tmp_path) -> AsyncGenerator[RecordSource, None]:
    """Initialized, empty record source of each backend."""
    if request.param == "memory":
        record_source: RecordSource = InMemoryRecordSource()
    else:
        record_source = SQLiteRecordSource(db_path=str(tmp_path / "graph.db"))
    await record_source.initialize()
    yield record_source
    await record_source.close()


@pytest.fixture
async def seeded_source(source: InMemoryRecordSource) -> InMemoryRecordSource:
    """
    Record source with a small knowledge base:

    - c1 "Attention Is All You Need" [ml, nlp]
    - c2 "Rust Ownership" [rust]
    - c3 "Gradient Descent" [ml] with a counterpoint
    - m1 memo, m2 memo (unconnected)
    - t1 #ml (count 3), t2 #rust (count 1), t3 #nlp (count 2)
    """
    await source.put_content(
        Content(id="c1", title="Attention Is All You Need", tags=["ml", "nlp"])
    )
    await source.put_content(Content(id="c2", title="Rust Ownership", tags=["rust"]))
    await source.put_content(
        Content(
            id="c3",
            title="Gradient Descent",
            tags=["ml"],
            counterpoint="Second-order methods converge faster",
        )
    )
    await source.put_memo(Memo(id="m1", text="Transformers replace recurrence entirely"))
    await source.put_memo(Memo(id="m2", text="Borrow checker notes"))
    await source.put_tag(Tag(id="t1", name="ml", count=3))
    await source.put_tag(Tag(id="t2", name="rust", count=1))
    await source.put_tag(Tag(id="t3", name="nlp", count=2))
    return source


@pytest.fixture
def store(source: InMemoryRecordSource) -> ConnectionStore:
    """Connection store over the empty source."""
    return ConnectionStore(source)


@pytest.fixture
async def service(
    seeded_source: InMemoryRecordSource, test_config: Config
) -> KnowledgeGraphService:
    """Knowledge graph service over the seeded source."""
    graph_service = KnowledgeGraphService(seeded_source, test_config)
    await graph_service.initialize()
    return graph_service
