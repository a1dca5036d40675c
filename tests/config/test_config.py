"""
Tests for configuration management.

Tests config loading from:
1. Defaults
2. Environment variables
3. YAML files
4. Combined (env overrides YAML)
"""

import pytest
import yaml

from conceptweave.config import Config, IngestionConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate from the developer's environment and any .env file."""
    monkeypatch.chdir(tmp_path)
    for key in (
        "CW_LLM_PROVIDER",
        "CW_LLM_MODEL",
        "CW_LLM_API_KEY",
        "CW_DB_PATH",
        "CW_CALL_TIMEOUT",
        "CW_EMBEDDING_FAILURE_FATAL",
        "CW_NORMALIZE_LABELS",
        "CW_MAX_CONCEPTS",
        "CW_SIMILARITY_SCAN_LIMIT",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.mark.unit
class TestConfigDefaults:
    def test_defaults(self):
        config = Config()

        assert config.llm.provider == "ollama"
        assert config.llm.model == "llama3.1:8b"
        assert config.llm.base_url is None
        assert config.embedder.model == "nomic-embed-text"
        assert config.embedder.base_url is None
        assert config.storage.backend == "sqlite"
        assert config.storage.db_path == "data/conceptweave.db"

    def test_ingestion_defaults(self):
        ingestion = Config().ingestion

        assert ingestion.palette == ["#3b82f6", "#10b981", "#f59e0b", "#ef4444", "#8b5cf6"]
        assert ingestion.canvas_x == (200.0, 600.0)
        assert ingestion.canvas_y == (150.0, 450.0)
        assert ingestion.normalize_labels is False
        assert ingestion.embedding_failure_fatal is False
        assert ingestion.url_marker_tag == "url"
        assert ingestion.call_timeout == 60.0
        assert ingestion.similarity_scan_limit == 1000

    def test_empty_palette_rejected(self):
        with pytest.raises(ValueError):
            IngestionConfig(palette=[])


@pytest.mark.unit
class TestConfigFromEnv:
    def test_env_values(self, monkeypatch):
        monkeypatch.setenv("CW_LLM_PROVIDER", "openai")
        monkeypatch.setenv("CW_LLM_MODEL", "gpt-4o-mini")
        monkeypatch.setenv("CW_LLM_API_KEY", "sk-test")
        monkeypatch.setenv("CW_DB_PATH", "/tmp/cw.db")
        monkeypatch.setenv("CW_CALL_TIMEOUT", "5.5")
        monkeypatch.setenv("CW_EMBEDDING_FAILURE_FATAL", "true")
        monkeypatch.setenv("CW_NORMALIZE_LABELS", "1")
        monkeypatch.setenv("CW_MAX_CONCEPTS", "4")
        monkeypatch.setenv("CW_SIMILARITY_SCAN_LIMIT", "50")

        config = Config.from_env()

        assert config.llm.provider == "openai"
        assert config.llm.model == "gpt-4o-mini"
        assert config.llm.api_key == "sk-test"
        assert config.storage.db_path == "/tmp/cw.db"
        assert config.ingestion.call_timeout == 5.5
        assert config.ingestion.embedding_failure_fatal is True
        assert config.ingestion.normalize_labels is True
        assert config.ingestion.max_concepts == 4
        assert config.ingestion.similarity_scan_limit == 50

    def test_env_file(self, tmp_path, monkeypatch):
        # Registered so the value loaded from the file is removed afterwards
        monkeypatch.setenv("CW_LLM_MODEL", "placeholder")
        monkeypatch.delenv("CW_LLM_MODEL")
        env_file = tmp_path / ".env.test"
        env_file.write_text("CW_LLM_MODEL=mistral\n")

        config = Config.from_env(env_file=env_file)

        assert config.llm.model == "mistral"

    def test_empty_value_uses_default(self, monkeypatch):
        monkeypatch.setenv("CW_LLM_MODEL", "")

        assert Config.from_env().llm.model == "llama3.1:8b"


@pytest.mark.unit
class TestConfigFromYaml:
    def test_from_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "llm": {"model": "qwen2.5"},
                    "ingestion": {"palette": ["#000000"], "max_connections": 2},
                }
            )
        )

        config = Config.from_yaml(path)

        assert config.llm.model == "qwen2.5"
        assert config.ingestion.palette == ["#000000"]
        assert config.ingestion.max_connections == 2

    def test_missing_yaml(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Config.from_yaml(tmp_path / "missing.yaml")

    def test_env_overrides_yaml(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text(
            yaml.safe_dump({"llm": {"model": "from-yaml"}, "storage": {"db_path": "y.db"}})
        )
        monkeypatch.setenv("CW_LLM_MODEL", "from-env")

        config = Config.from_env_or_yaml(yaml_path=path)

        assert config.llm.model == "from-env"
        assert config.storage.db_path == "y.db"
