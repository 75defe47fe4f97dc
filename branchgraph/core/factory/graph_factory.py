"""
Factory for creating graph store backends.
"""

from branchgraph.config import Config
from branchgraph.core.graph_store.base import GraphStore
from branchgraph.core.graph_store.sqlite_store import SQLiteGraphStore
from branchgraph.utils.exceptions import ConfigurationError


class GraphStoreFactory:
    """Factory for creating graph store backends from configuration."""

    @staticmethod
    def create(config: Config) -> GraphStore:
        """
        Create graph store from configuration.

        Args:
            config: Main configuration object

        Returns:
            Graph store instance

        Raises:
            ConfigurationError: If backend is not supported
        """
        if config.graph_store.backend == "sqlite":
            return SQLiteGraphStore(db_path=config.graph_store.sqlite_path)
        else:
            raise ConfigurationError(
                f"Unsupported graph backend: {config.graph_store.backend}",
                context={"backend": config.graph_store.backend},
            )
