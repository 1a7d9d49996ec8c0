"""
ID generation utilities for ConnectGraph.

- Connections: conn_xxx
- Tag-cluster patterns: pattern-<tag_id>
- Repeat-connection patterns: pattern-rel-<relationship>
"""

from uuid import uuid4


def generate_connection_id() -> str:
    """
    Generate unique Connection ID.

    Returns:
        ID in format "conn_xxx" where xxx is 12 hex characters
    """
    return f"conn_{uuid4().hex[:12]}"


def generate_tag_cluster_pattern_id(tag_id: str) -> str:
    """
    Generate the stable ID of a tag-cluster pattern.

    Patterns are recomputed on demand, so the ID is derived from the
    tag rather than random; the same cluster keeps the same ID across runs.
    """
    return f"pattern-{tag_id}"


def generate_repeat_pattern_id(relationship: str) -> str:
    """Generate the stable ID of a repeat-connection pattern."""
    return f"pattern-rel-{relationship}"
