"""In-memory record source, used for tests and the default service setup."""

from connectgraph.core.record_source.base import RecordSource
from connectgraph.models.connection import Connection
from connectgraph.models.entities import Content, Memo, Tag


class InMemoryRecordSource(RecordSource):
    """
    Dict-backed record source.

    Records are copied on the way in and out so callers never alias stored state.
    """

    def __init__(self):
        self.contents: dict[str, Content] = {}
        self.memos: dict[str, Memo] = {}
        self.tags: dict[str, Tag] = {}
        self.connections: dict[str, Connection] = {}
        self.initialized = False

    async def initialize(self) -> None:
        self.initialized = True

    async def list_contents(self) -> list[Content]:
        return [content.model_copy() for content in self.contents.values()]

    async def get_content(self, content_id: str) -> Content | None:
        content = self.contents.get(content_id)
        return content.model_copy() if content else None

    async def list_memos(self) -> list[Memo]:
        return [memo.model_copy() for memo in self.memos.values()]

    async def list_tags(self) -> list[Tag]:
        return [tag.model_copy() for tag in self.tags.values()]

    async def put_content(self, content: Content) -> None:
        self.contents[content.id] = content.model_copy()

    async def put_memo(self, memo: Memo) -> None:
        self.memos[memo.id] = memo.model_copy()

    async def put_tag(self, tag: Tag) -> None:
        self.tags[tag.id] = tag.model_copy()

    async def list_connections(self) -> list[Connection]:
        connections = [conn.model_copy() for conn in self.connections.values()]
        connections.sort(key=lambda c: c.created_at, reverse=True)
        return connections

    async def get_connection(self, connection_id: str) -> Connection | None:
        connection = self.connections.get(connection_id)
        return connection.model_copy() if connection else None

    async def find_connection(self, source_id: str, target_id: str) -> Connection | None:
        for connection in self.connections.values():
            if connection.source_id == source_id and connection.target_id == target_id:
                return connection.model_copy()
        return None

    async def insert_connection(self, connection: Connection) -> None:
        self.connections[connection.id] = connection.model_copy()

    async def save_connection(self, connection: Connection) -> None:
        if connection.id in self.connections:
            self.connections[connection.id] = connection.model_copy()

    async def remove_connection(self, connection_id: str) -> None:
        self.connections.pop(connection_id, None)

    async def close(self) -> None:
        self.initialized = False
