"""Pattern detection over the connection set."""

from collections import Counter, defaultdict

from connectgraph.models.connection import Connection
from connectgraph.models.entities import EntityKind, Tag
from connectgraph.models.pattern import Pattern, PatternType
from connectgraph.utils.id_generator import (
    generate_repeat_pattern_id,
    generate_tag_cluster_pattern_id,
)
from connectgraph.utils.logger import get_logger

logger = get_logger(__name__)

# Fixed design constants
MIN_PATTERN_OCCURRENCES = 3
STRENGTH_NORMALIZER = 10


def pattern_strength(count: int) -> float:
    return min(count / STRENGTH_NORMALIZER, 1.0)


class PatternDetector:
    """
    Detects recurring structure in the connection set.

    Rules:
    - tag-cluster: a tag touched by >= 3 connections
    - repeat-connection: a relationship label used by >= 3 connections

    content-chain and topic-bridge are part of the taxonomy but have no rule.
    Runs on demand only; results are never stored.
    """

    def analyze(self, connections: list[Connection], tags: list[Tag]) -> list[Pattern]:
        """
        Run every detection rule.

        Args:
            connections: Full connection set
            tags: Known tags (used to name clusters)

        Returns:
            Tag-cluster patterns followed by repeat-connection patterns
        """
        if not connections:
            return []

        patterns = self.detect_tag_clusters(connections, tags)
        patterns.extend(self.detect_repeat_connections(connections))

        logger.info(f"Pattern analysis found {len(patterns)} pattern(s)")
        return patterns

    def detect_tag_clusters(self, connections: list[Connection], tags: list[Tag]) -> list[Pattern]:
        tag_counts: Counter[str] = Counter()
        for connection in connections:
            if connection.source_type == EntityKind.TAG:
                tag_counts[connection.source_id] += 1
            if connection.target_type == EntityKind.TAG:
                tag_counts[connection.target_id] += 1

        tags_by_id = {tag.id: tag for tag in tags}
        patterns = []

        for tag_id, count in tag_counts.items():
            if count < MIN_PATTERN_OCCURRENCES:
                continue
            tag = tags_by_id.get(tag_id)
            if tag is None:
                continue
            patterns.append(
                Pattern(
                    id=generate_tag_cluster_pattern_id(tag_id),
                    description=f"Tag '{tag.name}' connects {count} items",
                    type=PatternType.TAG_CLUSTER,
                    related_nodes=[tag_id],
                    strength=pattern_strength(count),
                )
            )

        return patterns

    def detect_repeat_connections(self, connections: list[Connection]) -> list[Pattern]:
        groups: defaultdict[str, list[Connection]] = defaultdict(list)
        for connection in connections:
            groups[connection.relationship].append(connection)

        patterns = []
        for relationship, group in groups.items():
            if len(group) < MIN_PATTERN_OCCURRENCES:
                continue
            patterns.append(
                Pattern(
                    id=generate_repeat_pattern_id(relationship),
                    description=f"'{relationship}' connection repeats {len(group)} times",
                    type=PatternType.REPEAT_CONNECTION,
                    related_nodes=[
                        node_id for c in group for node_id in (c.source_id, c.target_id)
                    ],
                    strength=pattern_strength(len(group)),
                )
            )

        return patterns
