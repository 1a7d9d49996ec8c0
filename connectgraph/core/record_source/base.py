"""
Base interface for the record source.

The record source is the persistence collaborator behind the graph engine:
it supplies snapshots of contents, memos, tags and connections, and stores
the connection mutations the engine performs.
"""

from abc import ABC, abstractmethod

from connectgraph.models.connection import Connection
from connectgraph.models.entities import Content, Memo, Tag


class RecordSource(ABC):
    """Abstract base class for record source implementations."""

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the record source (create tables/schema)."""
        pass

    # ═══════════════════════════════════════════════════════════
    # ENTITY SNAPSHOTS
    # ═══════════════════════════════════════════════════════════

    @abstractmethod
    async def list_contents(self) -> list[Content]:
        """Return every content item."""
        pass

    @abstractmethod
    async def get_content(self, content_id: str) -> Content | None:
        """
        Retrieve a content item by ID.

        Args:
            content_id: Content identifier

        Returns:
            Content or None if not found
        """
        pass

    @abstractmethod
    async def list_memos(self) -> list[Memo]:
        """Return every memo."""
        pass

    @abstractmethod
    async def list_tags(self) -> list[Tag]:
        """Return every tag with its usage count."""
        pass

    @abstractmethod
    async def put_content(self, content: Content) -> None:
        """Insert or replace a content item."""
        pass

    @abstractmethod
    async def put_memo(self, memo: Memo) -> None:
        """Insert or replace a memo."""
        pass

    @abstractmethod
    async def put_tag(self, tag: Tag) -> None:
        """Insert or replace a tag."""
        pass

    # ═══════════════════════════════════════════════════════════
    # CONNECTION OPERATIONS
    # ═══════════════════════════════════════════════════════════

    @abstractmethod
    async def list_connections(self) -> list[Connection]:
        """
        Return every connection, newest first.

        Returns:
            Connections ordered by created_at descending
        """
        pass

    @abstractmethod
    async def get_connection(self, connection_id: str) -> Connection | None:
        """
        Get a connection by ID.

        Args:
            connection_id: Connection identifier

        Returns:
            Connection or None
        """
        pass

    @abstractmethod
    async def find_connection(self, source_id: str, target_id: str) -> Connection | None:
        """
        Find the connection for an ordered (source, target) pair.

        Args:
            source_id: Source entity ID
            target_id: Target entity ID

        Returns:
            Connection or None
        """
        pass

    @abstractmethod
    async def insert_connection(self, connection: Connection) -> None:
        """
        Store a new connection.

        Args:
            connection: Connection to insert
        """
        pass

    @abstractmethod
    async def save_connection(self, connection: Connection) -> None:
        """
        Persist the mutable fields of an existing connection.

        Args:
            connection: Connection with updated fields
        """
        pass

    @abstractmethod
    async def remove_connection(self, connection_id: str) -> None:
        """
        Delete a connection. Missing IDs are ignored.

        Args:
            connection_id: Connection identifier
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the connection to the record source."""
        pass
