"""
Factory for creating storage backends.
"""

from conceptweave.config import StorageConfig
from conceptweave.core.stores.sqlite_store import SQLiteStore
from conceptweave.utils.exceptions import ConfigurationError


class StoreFactory:
    """Factory for creating the content/summary/graph store from configuration."""

    @staticmethod
    def create(config: StorageConfig) -> SQLiteStore:
        """
        Create store from configuration.

        Args:
            config: Storage configuration

        Returns:
            Store implementing ContentStore, SummaryStore and ConceptGraphStore

        Raises:
            ConfigurationError: If backend is not supported
        """
        if config.backend == "sqlite":
            return SQLiteStore(db_path=config.db_path)
        else:
            raise ConfigurationError(f"Unsupported storage backend: {config.backend}")
