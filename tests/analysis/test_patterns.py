"""
Tests for PatternDetector.

Tests cover:
1. Tag-cluster detection and threshold
2. Repeat-connection detection and threshold boundary
3. Ordering and strength normalization
4. Undetected taxonomy types
"""

import pytest

from connectgraph.core.analysis import PatternDetector
from connectgraph.core.analysis.patterns import pattern_strength
from connectgraph.models import EntityKind, PatternType, Tag


@pytest.fixture
def detector() -> PatternDetector:
    return PatternDetector()


class TestTagClusters:
    """Tag-cluster rule."""

    def test_three_connections_form_cluster(self, detector, make_connection):
        connections = [
            make_connection(f"c{i}", "t1", f"rel{i}", target_type=EntityKind.TAG)
            for i in range(3)
        ]
        patterns = detector.analyze(connections, [Tag(id="t1", name="ml", count=3)])

        assert len(patterns) == 1
        pattern = patterns[0]
        assert pattern.type == PatternType.TAG_CLUSTER
        assert pattern.id == "pattern-t1"
        assert pattern.related_nodes == ["t1"]
        assert pattern.description == "Tag 'ml' connects 3 items"

    def test_two_connections_not_enough(self, detector, make_connection):
        connections = [
            make_connection("c1", "t1", "a", target_type=EntityKind.TAG),
            make_connection("t1", "c2", "b", source_type=EntityKind.TAG),
        ]
        assert detector.analyze(connections, [Tag(id="t1", name="ml")]) == []

    def test_source_side_tags_counted(self, detector, make_connection):
        connections = [
            make_connection("t1", f"c{i}", f"rel{i}", source_type=EntityKind.TAG)
            for i in range(4)
        ]
        patterns = detector.analyze(connections, [Tag(id="t1", name="ml")])

        assert patterns[0].description == "Tag 'ml' connects 4 items"
        assert patterns[0].strength == pytest.approx(0.4)

    def test_unknown_tag_skipped(self, detector, make_connection):
        connections = [
            make_connection(f"c{i}", "t-gone", f"rel{i}", target_type=EntityKind.TAG)
            for i in range(3)
        ]
        assert detector.detect_tag_clusters(connections, []) == []

    def test_non_tag_endpoints_ignored(self, detector, make_connection):
        """A content hub with many links is not a tag cluster."""
        connections = [make_connection("hub", f"c{i}", f"rel{i}") for i in range(5)]
        assert detector.detect_tag_clusters(connections, [Tag(id="hub", name="x")]) == []


class TestRepeatConnections:
    """Repeat-connection rule."""

    def test_exactly_two_produce_nothing(self, detector, make_connection):
        connections = [make_connection("a", "b", "supports"), make_connection("c", "d", "supports")]
        assert detector.analyze(connections, []) == []

    def test_exactly_three_produce_one(self, detector, make_connection):
        connections = [
            make_connection("a", "b", "supports"),
            make_connection("c", "d", "supports"),
            make_connection("e", "f", "supports"),
        ]
        patterns = detector.analyze(connections, [])

        assert len(patterns) == 1
        pattern = patterns[0]
        assert pattern.type == PatternType.REPEAT_CONNECTION
        assert pattern.id == "pattern-rel-supports"
        assert pattern.strength == pytest.approx(0.3)
        assert pattern.related_nodes == ["a", "b", "c", "d", "e", "f"]
        assert pattern.description == "'supports' connection repeats 3 times"

    def test_strength_capped_at_one(self, detector, make_connection):
        connections = [make_connection(f"a{i}", f"b{i}", "related") for i in range(15)]
        assert detector.detect_repeat_connections(connections)[0].strength == 1.0


class TestAnalyze:
    """Combined analysis."""

    def test_empty_connections(self, detector):
        assert detector.analyze([], [Tag(id="t1", name="ml", count=10)]) == []

    def test_clusters_before_repeats(self, detector, make_connection):
        connections = [
            make_connection(f"c{i}", "t1", "related", target_type=EntityKind.TAG)
            for i in range(3)
        ]
        patterns = detector.analyze(connections, [Tag(id="t1", name="ml")])

        assert [p.type for p in patterns] == [
            PatternType.TAG_CLUSTER,
            PatternType.REPEAT_CONNECTION,
        ]

    def test_chain_and_bridge_never_detected(self, detector, make_connection):
        """content-chain and topic-bridge exist in the taxonomy only."""
        connections = [
            make_connection("a", "b", "extends"),
            make_connection("b", "c", "extends"),
            make_connection("c", "d", "extends"),
        ]
        types = {p.type for p in detector.analyze(connections, [])}

        assert PatternType.CONTENT_CHAIN not in types
        assert PatternType.TOPIC_BRIDGE not in types

    def test_pattern_strength(self):
        assert pattern_strength(3) == pytest.approx(0.3)
        assert pattern_strength(10) == 1.0
        assert pattern_strength(12) == 1.0
