"""
Heuristic connection suggestions for a content item.

Two heuristics, in order:
1. Tag overlap: other content sharing a tag and not yet connected (confidence 0.7)
2. Counterpoint comparison: another content with a counterpoint sharing a tag (0.8)

Results are de-duplicated by target (first wins) and truncated to the first
five in insertion order, not ranked by confidence.
"""

from connectgraph.models.connection import Connection
from connectgraph.models.entities import Content, EntityKind
from connectgraph.models.pattern import SuggestedConnection
from connectgraph.utils.logger import get_logger

logger = get_logger(__name__)

MAX_SUGGESTIONS = 5
TAG_OVERLAP_CONFIDENCE = 0.7
COUNTERPOINT_CONFIDENCE = 0.8


def are_connected(connections: list[Connection], first_id: str, second_id: str) -> bool:
    """Check for a connection between two entities in either direction."""
    return any(c.touches(first_id) and c.other_end(first_id) == second_id for c in connections)


def dedupe_by_target(suggestions: list[SuggestedConnection]) -> list[SuggestedConnection]:
    """Keep the first suggestion for each target ID."""
    seen: set[str] = set()
    unique = []
    for suggestion in suggestions:
        if suggestion.target_id in seen:
            continue
        seen.add(suggestion.target_id)
        unique.append(suggestion)
    return unique


def merge_suggestions(
    local: list[SuggestedConnection], external: list[SuggestedConnection]
) -> list[SuggestedConnection]:
    """
    Merge externally sourced suggestions (e.g. from an AI service) into local ones.

    Local suggestions come first; a target already suggested locally is not
    repeated. No semantic reconciliation of reasons or confidences is attempted.
    """
    return dedupe_by_target([*local, *external])


class SuggestionEngine:
    """Deterministic suggestion heuristics over a record snapshot."""

    def suggest_for(
        self,
        content_id: str,
        contents: list[Content],
        connections: list[Connection],
    ) -> list[SuggestedConnection]:
        """
        Propose likely-missing connections for a content item.

        Args:
            content_id: Content to suggest connections for
            contents: All content items
            connections: All connections

        Returns:
            Up to five suggestions with unique target IDs
        """
        source = next((c for c in contents if c.id == content_id), None)
        if source is None:
            return []

        suggestions: list[SuggestedConnection] = []

        for tag in source.tags:
            for candidate in contents:
                if candidate.id == content_id or tag not in candidate.tags:
                    continue
                if are_connected(connections, content_id, candidate.id):
                    continue
                suggestions.append(
                    SuggestedConnection(
                        target_id=candidate.id,
                        target_type=EntityKind.CONTENT,
                        target_label=candidate.title,
                        reason=f"shares tag '{tag}'",
                        confidence=TAG_OVERLAP_CONFIDENCE,
                    )
                )

        if source.counterpoint:
            contrast = next(
                (
                    c
                    for c in contents
                    if c.id != content_id
                    and c.counterpoint
                    and any(t in source.tags for t in c.tags)
                ),
                None,
            )
            if contrast is not None:
                suggestions.append(
                    SuggestedConnection(
                        target_id=contrast.id,
                        target_type=EntityKind.CONTENT,
                        target_label=contrast.title,
                        reason="counterpoint comparison",
                        confidence=COUNTERPOINT_CONFIDENCE,
                    )
                )

        result = dedupe_by_target(suggestions)[:MAX_SUGGESTIONS]
        logger.debug(f"Suggested {len(result)} connection(s) for content {content_id}")
        return result
