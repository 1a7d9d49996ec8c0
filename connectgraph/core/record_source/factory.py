"""
Factory for creating record source backends.
"""

from connectgraph.config import Config
from connectgraph.core.record_source.base import RecordSource
from connectgraph.core.record_source.memory_source import InMemoryRecordSource
from connectgraph.core.record_source.sqlite_source import SQLiteRecordSource
from connectgraph.utils.exceptions import ConfigurationError


class RecordSourceFactory:
    """Factory for creating record sources from configuration."""

    @staticmethod
    def create(config: Config) -> RecordSource:
        """
        Create record source from configuration.

        Args:
            config: Main configuration object

        Returns:
            Record source instance

        Raises:
            ConfigurationError: If backend is not supported
        """
        if config.store.backend == "memory":
            return InMemoryRecordSource()
        elif config.store.backend == "sqlite":
            return SQLiteRecordSource(db_path=config.store.db_path)
        else:
            raise ConfigurationError(f"Unsupported record source backend: {config.store.backend}")
