"""
Knowledge Graph Service - integrates all components.

Brings together:
- Record source (persistence collaborator)
- Connection store (mutations)
- Graph projector (read model)
- Pattern detector and suggestion engine (on-demand analysis)
"""

from connectgraph.config import Config
from connectgraph.core.analysis.patterns import PatternDetector
from connectgraph.core.analysis.suggestions import SuggestionEngine
from connectgraph.core.projector import GraphProjector, connection_stats, related_nodes
from connectgraph.core.record_source.base import RecordSource
from connectgraph.models.graph import ConnectionStats, GraphData, GraphNode
from connectgraph.models.pattern import Pattern, SuggestedConnection
from connectgraph.services.connection_store import ConnectionStore
from connectgraph.utils.logger import get_logger

logger = get_logger(__name__)


class KnowledgeGraphService:
    """
    Facade over the knowledge connection graph.

    Every read takes a fresh snapshot from the record source; nothing derived
    (nodes, patterns, suggestions) is cached between calls.
    """

    def __init__(self, source: RecordSource, config: Config | None = None):
        """
        Initialize service.

        Args:
            source: Record source supplying contents, memos, tags and connections
            config: Configuration object
        """
        self.source = source
        self.config = config or Config()
        self.connections = ConnectionStore(source)
        self.projector = GraphProjector()
        self.detector = PatternDetector()
        self.suggestions = SuggestionEngine()

    async def initialize(self) -> None:
        """Initialize the record source."""
        logger.info("Initializing knowledge graph service")
        await self.source.initialize()
        logger.info("Knowledge graph service ready")

    async def close(self) -> None:
        await self.source.close()

    async def graph(self) -> GraphData:
        """Project the current records into a renderable graph."""
        contents = await self.source.list_contents()
        memos = await self.source.list_memos()
        tags = await self.source.list_tags()
        connections = await self.source.list_connections()
        return self.projector.project(contents, memos, tags, connections)

    async def analyze_patterns(self) -> list[Pattern]:
        """Run pattern detection over the full connection set."""
        connections = await self.source.list_connections()
        tags = await self.source.list_tags()
        return self.detector.analyze(connections, tags)

    async def suggest_connections(self, content_id: str) -> list[SuggestedConnection]:
        """
        Suggest likely-missing connections for a content item.

        Args:
            content_id: Content to suggest for

        Returns:
            Up to five suggestions; empty for an unknown content ID
        """
        if await self.source.get_content(content_id) is None:
            logger.debug(f"No suggestions for unknown content {content_id}")
            return []
        contents = await self.source.list_contents()
        connections = await self.source.list_connections()
        return self.suggestions.suggest_for(content_id, contents, connections)

    async def related_nodes(self, node_id: str) -> list[GraphNode]:
        """Graph nodes directly connected to node_id."""
        graph = await self.graph()
        connections = await self.source.list_connections()
        return related_nodes(graph, connections, node_id)

    async def stats(self) -> ConnectionStats:
        """Aggregate connection statistics."""
        graph = await self.graph()
        connections = await self.source.list_connections()
        return connection_stats(graph, connections)
