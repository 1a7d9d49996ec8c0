"""Utility modules for ConnectGraph."""

from connectgraph.utils.exceptions import (
    ConfigurationError,
    ConnectGraphError,
    LayoutError,
    RecordSourceError,
    StoreError,
    ValidationError,
)
from connectgraph.utils.id_generator import (
    generate_connection_id,
    generate_repeat_pattern_id,
    generate_tag_cluster_pattern_id,
)
from connectgraph.utils.logger import get_logger, setup_logging

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # ID Generators
    "generate_connection_id",
    "generate_tag_cluster_pattern_id",
    "generate_repeat_pattern_id",
    # Exceptions
    "ConnectGraphError",
    "StoreError",
    "RecordSourceError",
    "ValidationError",
    "ConfigurationError",
    "LayoutError",
]
