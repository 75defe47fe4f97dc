"""
Tests for configuration management.

Tests config loading from:
1. Environment variables
2. YAML files
3. Combined (env overrides YAML)
"""

import pytest
import yaml
from pydantic import ValidationError as PydanticValidationError

from branchgraph.config import AutoLinkConfig, Config, VisualizationDefaults
from branchgraph.models.branch import BranchType


class TestConfigDefaults:
    """Test default configuration values."""

    def test_default_config_creation(self):
        """Test creating config with defaults."""
        config = Config()

        # Graph store
        assert config.graph_store.backend == "sqlite"
        assert config.graph_store.sqlite_path == "data/branchgraph.db"

        # Auto-link defaults
        assert config.auto_link.default_types == [
            BranchType.THEME,
            BranchType.EMOTION,
            BranchType.TIME,
        ]
        assert config.auto_link.min_weight == 0.3
        assert config.auto_link.max_connections == 10
        assert config.auto_link.bidirectional is False
        assert config.auto_link.bidirectional_threshold == 0.5
        assert config.auto_link.candidate_pool_limit == 100

        # Visualization defaults
        assert config.visualization.min_weight == 0.1
        assert config.visualization.max_depth == 2

        # Logging
        assert config.logging.level == "INFO"

    def test_auto_link_bounds(self):
        """Out-of-range auto-link settings are rejected."""
        with pytest.raises(PydanticValidationError):
            AutoLinkConfig(min_weight=1.5)
        with pytest.raises(PydanticValidationError):
            AutoLinkConfig(max_connections=0)
        with pytest.raises(PydanticValidationError):
            AutoLinkConfig(max_connections=51)

    def test_visualization_depth_bounds(self):
        with pytest.raises(PydanticValidationError):
            VisualizationDefaults(max_depth=6)


class TestConfigFromEnv:
    """Test loading configuration from environment variables."""

    def test_from_env_basic(self, monkeypatch):
        """Test loading basic config from environment."""
        monkeypatch.setenv("BRANCHGRAPH_SQLITE_PATH", "/tmp/test.db")
        monkeypatch.setenv("BRANCHGRAPH_LOG_LEVEL", "DEBUG")

        config = Config.from_env()

        assert config.graph_store.sqlite_path == "/tmp/test.db"
        assert config.logging.level == "DEBUG"

    def test_from_env_with_numbers(self, monkeypatch):
        """Test loading numeric values from environment."""
        monkeypatch.setenv("BRANCHGRAPH_AUTOLINK_MIN_WEIGHT", "0.45")
        monkeypatch.setenv("BRANCHGRAPH_AUTOLINK_MAX_CONNECTIONS", "25")
        monkeypatch.setenv("BRANCHGRAPH_VIS_MAX_DEPTH", "4")

        config = Config.from_env()

        assert config.auto_link.min_weight == 0.45
        assert config.auto_link.max_connections == 25
        assert config.visualization.max_depth == 4

    def test_from_env_with_booleans(self, monkeypatch):
        """Test loading boolean values from environment."""
        monkeypatch.setenv("BRANCHGRAPH_AUTOLINK_BIDIRECTIONAL", "true")
        monkeypatch.setenv("BRANCHGRAPH_LOG_TO_FILE", "0")

        config = Config.from_env()

        assert config.auto_link.bidirectional is True
        assert config.logging.log_to_file is False

    def test_empty_value_uses_default(self, monkeypatch):
        monkeypatch.setenv("BRANCHGRAPH_AUTOLINK_MAX_CONNECTIONS", "")

        config = Config.from_env()

        assert config.auto_link.max_connections == 10

    def test_from_env_file(self, tmp_path, monkeypatch):
        """Test loading from an explicit .env file."""
        # load_dotenv writes os.environ; register the key so teardown removes it
        monkeypatch.setenv("BRANCHGRAPH_AUTOLINK_POOL_LIMIT", "1")
        monkeypatch.delenv("BRANCHGRAPH_AUTOLINK_POOL_LIMIT")
        env_file = tmp_path / ".env.test"
        env_file.write_text("BRANCHGRAPH_AUTOLINK_POOL_LIMIT=20\n")

        config = Config.from_env(env_file=env_file)

        assert config.auto_link.candidate_pool_limit == 20


class TestConfigFromYaml:
    """Test loading configuration from YAML files."""

    def test_from_yaml(self, tmp_path):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text(
            yaml.safe_dump(
                {
                    "graph_store": {"sqlite_path": "graphs/main.db"},
                    "auto_link": {"min_weight": 0.5, "bidirectional": True},
                }
            )
        )

        config = Config.from_yaml(yaml_path)

        assert config.graph_store.sqlite_path == "graphs/main.db"
        assert config.auto_link.min_weight == 0.5
        assert config.auto_link.bidirectional is True
        assert config.auto_link.max_connections == 10

    def test_from_yaml_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Config.from_yaml(tmp_path / "missing.yaml")

    def test_empty_yaml_gives_defaults(self, tmp_path):
        yaml_path = tmp_path / "empty.yaml"
        yaml_path.write_text("")

        assert Config.from_yaml(yaml_path) == Config()


class TestConfigFromEnvOrYaml:
    """Test env > YAML > defaults priority."""

    def test_env_overrides_yaml(self, tmp_path, monkeypatch):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text(
            yaml.safe_dump(
                {
                    "graph_store": {"sqlite_path": "from_yaml.db"},
                    "visualization": {"max_depth": 3},
                }
            )
        )
        monkeypatch.setenv("BRANCHGRAPH_SQLITE_PATH", "from_env.db")

        config = Config.from_env_or_yaml(yaml_path=yaml_path)

        assert config.graph_store.sqlite_path == "from_env.db"
        assert config.visualization.max_depth == 3

    def test_missing_yaml_falls_back_to_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BRANCHGRAPH_AUTOLINK_MIN_WEIGHT", "0.6")

        config = Config.from_env_or_yaml(yaml_path=tmp_path / "missing.yaml")

        assert config.auto_link.min_weight == 0.6

    def test_env_keeps_other_yaml_fields_in_section(self, tmp_path, monkeypatch):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text(
            yaml.safe_dump({"auto_link": {"min_weight": 0.5, "max_connections": 4}})
        )
        monkeypatch.setenv("BRANCHGRAPH_AUTOLINK_BIDIRECTIONAL", "true")

        config = Config.from_env_or_yaml(yaml_path=yaml_path)

        assert config.auto_link.bidirectional is True
        assert config.auto_link.min_weight == 0.5
        assert config.auto_link.max_connections == 4

    def test_env_value_equal_to_default_still_overrides_yaml(self, tmp_path, monkeypatch):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text(
            yaml.safe_dump({"logging": {"level": "DEBUG", "log_dir": "yaml-logs"}})
        )
        monkeypatch.setenv("BRANCHGRAPH_LOG_LEVEL", "INFO")

        config = Config.from_env_or_yaml(yaml_path=yaml_path)

        assert config.logging.level == "INFO"
        assert config.logging.log_dir == "yaml-logs"


class TestEnvOverrides:
    def test_only_set_variables_are_returned(self, monkeypatch):
        monkeypatch.setenv("BRANCHGRAPH_VIS_MAX_DEPTH", "4")
        monkeypatch.setenv("BRANCHGRAPH_LOG_TO_FILE", "no")
        monkeypatch.setenv("BRANCHGRAPH_SQLITE_PATH", "")

        assert Config.env_overrides() == {
            "visualization": {"max_depth": 4},
            "logging": {"log_to_file": False},
        }
