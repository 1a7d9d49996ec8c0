"""
Connection Store - CRUD over Connection records.

Handles:
- Merge-or-create: a repeated add for the same ordered pair strengthens the
  existing connection instead of inserting a duplicate
- Strength clamping on every mutation path
- Idempotent update/delete of unknown IDs
- Endpoint queries for a node

Record source failures propagate to the caller unchanged.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from connectgraph.core.record_source.base import RecordSource
from connectgraph.models.connection import (
    DEFAULT_STRENGTH,
    MAX_STRENGTH,
    Connection,
    ConnectionUpdate,
    clamp_strength,
)
from connectgraph.models.entities import EntityKind
from connectgraph.models.pattern import SuggestedConnection
from connectgraph.utils.exceptions import ValidationError
from connectgraph.utils.logger import get_logger

logger = get_logger(__name__)


class ConnectionStore:
    """
    Adapter owning every connection mutation the graph engine performs.

    Writes for the same (source_id, target_id) key are serialized with an
    asyncio.Lock, so the existence check and the write of add_connection can
    never interleave with another add for the same pair. A pair lock only
    lives while some add for that pair is running or waiting.
    """

    def __init__(self, source: RecordSource):
        """
        Initialize connection store.

        Args:
            source: Record source holding the connection collection
        """
        self.source = source
        self._pair_locks: dict[tuple[str, str], asyncio.Lock] = {}
        self._pair_users: dict[tuple[str, str], int] = {}

    @asynccontextmanager
    async def _pair_lock(self, key: tuple[str, str]) -> AsyncIterator[None]:
        lock = self._pair_locks.setdefault(key, asyncio.Lock())
        self._pair_users[key] = self._pair_users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._pair_users[key] -= 1
            if self._pair_users[key] == 0:
                del self._pair_users[key]
                del self._pair_locks[key]

    async def add_connection(
        self,
        source_id: str,
        target_id: str,
        source_type: EntityKind | str,
        target_type: EntityKind | str,
        relationship: str,
        strength: int | None = None,
    ) -> Connection:
        """
        Create a connection or strengthen the existing one for the same ordered pair.

        Args:
            source_id: Source entity ID
            target_id: Target entity ID
            source_type: Kind of the source entity
            target_type: Kind of the target entity
            relationship: Relationship label (canonical or free-form)
            strength: Initial strength for new connections (default 5, clamped)

        Returns:
            The stored connection after the write

        Raises:
            ValidationError: If source and target are the same entity
        """
        if not source_id or not target_id:
            raise ValidationError("Connection endpoints cannot be empty")
        if source_id == target_id:
            raise ValidationError(
                "Self-loop connections are not allowed", context={"node_id": source_id}
            )

        async with self._pair_lock((source_id, target_id)):
            existing = await self.source.find_connection(source_id, target_id)

            if existing:
                existing.strength = min(existing.strength + 1, MAX_STRENGTH)
                await self.source.save_connection(existing)
                logger.debug(
                    f"Strengthened connection {existing.id} ({source_id} -> {target_id}) "
                    f"to {existing.strength}"
                )
                return existing

            connection = Connection(
                source_id=source_id,
                target_id=target_id,
                source_type=EntityKind(source_type),
                target_type=EntityKind(target_type),
                relationship=relationship,
                strength=strength or DEFAULT_STRENGTH,
            )
            await self.source.insert_connection(connection)

        logger.info(
            f"Created connection {connection.id}: {source_id} -[{relationship}]-> {target_id}"
        )
        return connection

    async def update_connection(
        self, connection_id: str, updates: ConnectionUpdate | dict[str, Any]
    ) -> Connection | None:
        """
        Patch a connection's mutable fields.

        Args:
            connection_id: Connection identifier
            updates: Partial fields (relationship, strength, source_type, target_type)

        Returns:
            Updated connection, or None if the ID does not exist
        """
        if isinstance(updates, dict):
            updates = ConnectionUpdate(**updates)

        connection = await self.source.get_connection(connection_id)
        if connection is None:
            logger.debug(f"Ignoring update of unknown connection {connection_id}")
            return None

        patch = updates.model_dump(exclude_none=True)
        if "strength" in patch:
            patch["strength"] = clamp_strength(patch["strength"])

        updated = connection.model_copy(update=patch)
        await self.source.save_connection(updated)
        logger.debug(f"Updated connection {connection_id}: {sorted(patch)}")
        return updated

    async def delete_connection(self, connection_id: str) -> None:
        """
        Delete a connection. Deleting a missing ID is a no-op.

        Args:
            connection_id: Connection identifier
        """
        await self.source.remove_connection(connection_id)
        logger.debug(f"Deleted connection {connection_id}")

    async def list_connections(self) -> list[Connection]:
        """Return all connections, newest first."""
        return await self.source.list_connections()

    async def connections_for(self, node_id: str) -> list[Connection]:
        """
        Get every connection where the node is source or target.

        Args:
            node_id: Entity identifier

        Returns:
            Matching connections, newest first
        """
        connections = await self.source.list_connections()
        return [c for c in connections if c.touches(node_id)]

    async def related_node_ids(self, node_id: str) -> set[str]:
        """IDs of every entity directly connected to node_id, in either direction."""
        return {c.other_end(node_id) for c in await self.connections_for(node_id)}

    async def accept_suggestion(
        self,
        source_id: str,
        source_type: EntityKind | str,
        suggestion: SuggestedConnection,
        relationship: str = "related",
    ) -> Connection:
        """
        Commit a suggested connection through the normal creation path.

        Args:
            source_id: Entity the suggestion was computed for
            source_type: Kind of that entity
            suggestion: Accepted suggestion
            relationship: Relationship label to store

        Returns:
            The stored connection
        """
        return await self.add_connection(
            source_id=source_id,
            target_id=suggestion.target_id,
            source_type=source_type,
            target_type=suggestion.target_type,
            relationship=relationship,
        )
