"""
Configuration for BranchGraph.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from branchgraph.models.branch import BranchType

# Environment variable -> (config section, field)
ENV_FIELDS: dict[str, tuple[str, str]] = {
    "BRANCHGRAPH_GRAPH_BACKEND": ("graph_store", "backend"),
    "BRANCHGRAPH_SQLITE_PATH": ("graph_store", "sqlite_path"),
    "BRANCHGRAPH_AUTOLINK_MIN_WEIGHT": ("auto_link", "min_weight"),
    "BRANCHGRAPH_AUTOLINK_MAX_CONNECTIONS": ("auto_link", "max_connections"),
    "BRANCHGRAPH_AUTOLINK_BIDIRECTIONAL": ("auto_link", "bidirectional"),
    "BRANCHGRAPH_AUTOLINK_POOL_LIMIT": ("auto_link", "candidate_pool_limit"),
    "BRANCHGRAPH_VIS_MIN_WEIGHT": ("visualization", "min_weight"),
    "BRANCHGRAPH_VIS_MAX_DEPTH": ("visualization", "max_depth"),
    "BRANCHGRAPH_LOG_LEVEL": ("logging", "level"),
    "BRANCHGRAPH_LOG_TO_FILE": ("logging", "log_to_file"),
    "BRANCHGRAPH_LOG_DIR": ("logging", "log_dir"),
    "BRANCHGRAPH_LOG_FILE_ROTATION": ("logging", "file_rotation"),
    "BRANCHGRAPH_LOG_FILE_RETENTION": ("logging", "file_retention"),
    "BRANCHGRAPH_LOG_COMPRESSION": ("logging", "compression"),
    "BRANCHGRAPH_LOG_SERIALIZE": ("logging", "serialize"),
}


def _coerce(value: str, default: Any) -> Any:
    """Convert an environment string to the type of the field default."""
    if isinstance(default, bool):
        return value.lower() in ("true", "1", "yes")
    if isinstance(default, int):
        return int(value)
    if isinstance(default, float):
        return float(value)
    return value


def _load_env_file(env_file: str | Path | None) -> None:
    if env_file:
        load_dotenv(env_file)
    elif Path(".env").exists():
        load_dotenv()


class GraphStoreConfig(BaseModel):
    """Graph store backend configuration."""

    backend: str = "sqlite"
    sqlite_path: str = "data/branchgraph.db"


class AutoLinkConfig(BaseModel):
    """Defaults for heuristic auto-linking."""

    default_types: list[BranchType] = Field(
        default_factory=lambda: [BranchType.THEME, BranchType.EMOTION, BranchType.TIME]
    )
    min_weight: float = Field(default=0.3, ge=0.0, le=1.0)
    max_connections: int = Field(default=10, ge=1, le=50)
    bidirectional: bool = False
    # Reverse edges are only emitted for forward weights strictly above this
    bidirectional_threshold: float = 0.5
    # Most recent fragments compared pairwise when no focus fragment is given
    candidate_pool_limit: int = Field(default=100, ge=1)


class VisualizationDefaults(BaseModel):
    """Defaults for the visualization service."""

    min_weight: float = Field(default=0.1, ge=0.0, le=1.0)
    max_depth: int = Field(default=2, ge=1, le=5)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_file: bool = True
    log_dir: str = "logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str = "zip"
    serialize: bool = True


class Config(BaseModel):
    """Main configuration."""

    graph_store: GraphStoreConfig = Field(default_factory=GraphStoreConfig)
    auto_link: AutoLinkConfig = Field(default_factory=AutoLinkConfig)
    visualization: VisualizationDefaults = Field(default_factory=VisualizationDefaults)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in project root)

        Returns:
            Config instance

        Environment variables:
            BRANCHGRAPH_GRAPH_BACKEND: Graph backend (sqlite)
            BRANCHGRAPH_SQLITE_PATH: SQLite database path
            BRANCHGRAPH_AUTOLINK_MIN_WEIGHT: Default minimum auto-link weight
            BRANCHGRAPH_AUTOLINK_MAX_CONNECTIONS: Default auto-link cap
            BRANCHGRAPH_AUTOLINK_BIDIRECTIONAL: Emit reverse edges by default
            BRANCHGRAPH_AUTOLINK_POOL_LIMIT: Candidate pool size without focus
            BRANCHGRAPH_VIS_MIN_WEIGHT: Default visualization edge weight floor
            BRANCHGRAPH_VIS_MAX_DEPTH: Default focus traversal depth
            BRANCHGRAPH_LOG_LEVEL: Log level
            BRANCHGRAPH_LOG_TO_FILE, BRANCHGRAPH_LOG_DIR: File sink settings

        Unset or empty variables keep the field default.
        """
        _load_env_file(env_file)
        return cls(**cls.env_overrides())

    @classmethod
    def env_overrides(cls) -> dict[str, dict[str, Any]]:
        """Typed values of the BRANCHGRAPH_* variables that are set, keyed by section."""
        defaults = cls()
        overrides: dict[str, dict[str, Any]] = {}
        for key, (section, field) in ENV_FIELDS.items():
            value = os.getenv(key)
            if not value:
                continue
            default = getattr(getattr(defaults, section), field)
            overrides.setdefault(section, {})[field] = _coerce(value, default)
        return overrides

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

    @classmethod
    def from_env_or_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str | Path | None = None
    ) -> "Config":
        """
        Load configuration with priority: env vars > YAML > defaults.

        Args:
            yaml_path: Optional path to YAML config
            env_file: Optional path to .env file

        Returns:
            Config instance
        """
        if yaml_path and Path(yaml_path).exists():
            with open(yaml_path) as f:
                config_dict = yaml.safe_load(f) or {}
        else:
            config_dict = {}

        _load_env_file(env_file)

        # Env values override YAML one field at a time
        final_dict = {**config_dict}
        for section, fields in cls.env_overrides().items():
            final_dict[section] = {**(final_dict.get(section) or {}), **fields}

        return cls(**final_dict)


# Default config instance
default_config = Config()
