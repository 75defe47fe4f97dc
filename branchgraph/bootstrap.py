"""
Startup wiring: configuration, logging, graph store and services.
"""

from pathlib import Path

from branchgraph.config import Config
from branchgraph.core.factory import GraphStoreFactory
from branchgraph.core.graph_store.base import GraphStore
from branchgraph.services import (
    AutoLinker,
    BranchService,
    FragmentService,
    MemoryTreeBuilder,
    VisualizationService,
)
from branchgraph.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


class BranchGraph:
    """All services of one BranchGraph instance, sharing a single graph store."""

    def __init__(self, config: Config, graph_store: GraphStore):
        self.config = config
        self.graph_store = graph_store
        self.fragments = FragmentService(graph_store)
        self.branches = BranchService(graph_store)
        self.auto_linker = AutoLinker(graph_store, config=config.auto_link)
        self.memory_tree = MemoryTreeBuilder(graph_store)
        self.visualization = VisualizationService(graph_store, config=config.visualization)

    @classmethod
    async def start(
        cls,
        config: Config | None = None,
        yaml_path: str | Path | None = None,
        env_file: str | Path | None = None,
    ) -> "BranchGraph":
        """
        Load configuration, apply its logging section and open the graph store.

        Args:
            config: Ready configuration; loaded with env > YAML > defaults when omitted
            yaml_path: Optional YAML config used when config is omitted
            env_file: Optional .env file used when config is omitted

        Raises:
            ConfigurationError: If the graph backend is not supported
            GraphStoreError: If the store cannot be opened
        """
        if config is None:
            config = Config.from_env_or_yaml(yaml_path=yaml_path, env_file=env_file)

        configure_logging(config.logging)
        logger.info(
            f"Starting BranchGraph (backend={config.graph_store.backend}, "
            f"log_level={config.logging.level})"
        )

        graph_store = GraphStoreFactory.create(config)
        await graph_store.initialize()
        return cls(config, graph_store)

    async def close(self) -> None:
        await self.graph_store.close()
        logger.info("BranchGraph stopped")
