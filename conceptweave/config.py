"""
Configuration for ConceptWeave.

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
from pydantic import BaseModel, Field, field_validator


class LLMConfig(BaseModel):
    """LLM provider configuration (summaries, concepts, connection suggestions)."""

    provider: str = "ollama"  # ollama, openai
    model: str = "llama3.1:8b"
    base_url: str | None = None  # defaults to the local Ollama server for ollama
    api_key: str | None = None
    temperature: float = 0.0
    max_tokens: int = 2000
    timeout: float = 120.0


class EmbedderConfig(BaseModel):
    """Embedder configuration."""

    provider: str = "ollama"  # ollama, openai
    model: str = "nomic-embed-text"
    base_url: str | None = None  # defaults to the local Ollama server for ollama
    api_key: str | None = None
    timeout: float = 120.0


class StorageConfig(BaseModel):
    """Content, summary and concept graph storage."""

    backend: str = "sqlite"
    db_path: str = "data/conceptweave.db"


class IngestionConfig(BaseModel):
    """Ingestion pipeline behaviour."""

    # Per external call; a timeout counts as that call's failure
    call_timeout: float = 60.0
    embedding_failure_fatal: bool = False

    palette: list[str] = Field(
        default_factory=lambda: ["#3b82f6", "#10b981", "#f59e0b", "#ef4444", "#8b5cf6"]
    )
    canvas_x: tuple[float, float] = (200.0, 600.0)
    canvas_y: tuple[float, float] = (150.0, 450.0)

    normalize_labels: bool = False
    max_concepts: int = 10
    max_connections: int = 5
    url_marker_tag: str = "url"
    max_input_tokens: int = 8000
    # Newest items compared by related and search lookups
    similarity_scan_limit: int = 1000

    @field_validator("palette")
    @classmethod
    def _palette_not_empty(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("palette must contain at least one colour")
        return value


class URLExtractorConfig(BaseModel):
    """URL content extractor configuration."""

    timeout: float = 30.0
    user_agent: str = "ConceptWeave/1.0 (+content capture)"
    max_bytes: int = 5_000_000


class TokenizerConfig(BaseModel):
    """Token counting configuration."""

    provider: str = "tiktoken"  # tiktoken, approximate
    model: str = "cl100k_base"
    chars_per_token: float = 4.0


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

    llm: LLMConfig = Field(default_factory=LLMConfig)
    embedder: EmbedderConfig = Field(default_factory=EmbedderConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)
    url_extractor: URLExtractorConfig = Field(default_factory=URLExtractorConfig)
    tokenizer: TokenizerConfig = Field(default_factory=TokenizerConfig)
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
            CW_LLM_PROVIDER: LLM provider (ollama, openai)
            CW_LLM_MODEL: LLM model name
            CW_LLM_BASE_URL: LLM base URL
            CW_LLM_API_KEY: LLM API key (for OpenAI)
            CW_EMBEDDER_PROVIDER: Embedder provider
            CW_EMBEDDER_MODEL: Embedder model name
            CW_EMBEDDER_API_KEY: Embedder API key (for OpenAI)
            CW_STORAGE_BACKEND: Storage backend (sqlite)
            CW_DB_PATH: SQLite database path
            CW_CALL_TIMEOUT: Timeout for each external AI call in seconds
            CW_EMBEDDING_FAILURE_FATAL: Abort ingestion when embedding fails
            CW_NORMALIZE_LABELS: Deduplicate concepts on a normalised label
        """
        # Load .env file if provided or exists
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        def get_env(key: str, default: Any = None) -> Any:
            """Get environment variable with type conversion."""
            value = os.getenv(key)
            if value is None:
                return default
            if value == "":
                return default
            if isinstance(default, bool):
                return str(value).lower() in ("true", "1", "yes")
            if isinstance(default, int):
                return int(value)
            if isinstance(default, float):
                return float(value)
            return value

        ingestion_defaults = IngestionConfig()

        return cls(
            llm=LLMConfig(
                provider=get_env("CW_LLM_PROVIDER", "ollama"),
                model=get_env("CW_LLM_MODEL", "llama3.1:8b"),
                base_url=get_env("CW_LLM_BASE_URL"),
                api_key=get_env("CW_LLM_API_KEY"),
                temperature=get_env("CW_LLM_TEMPERATURE", 0.0),
                max_tokens=get_env("CW_LLM_MAX_TOKENS", 2000),
                timeout=get_env("CW_LLM_TIMEOUT", 120.0),
            ),
            embedder=EmbedderConfig(
                provider=get_env("CW_EMBEDDER_PROVIDER", "ollama"),
                model=get_env("CW_EMBEDDER_MODEL", "nomic-embed-text"),
                base_url=get_env("CW_EMBEDDER_BASE_URL"),
                api_key=get_env("CW_EMBEDDER_API_KEY"),
                timeout=get_env("CW_EMBEDDER_TIMEOUT", 120.0),
            ),
            storage=StorageConfig(
                backend=get_env("CW_STORAGE_BACKEND", "sqlite"),
                db_path=get_env("CW_DB_PATH", "data/conceptweave.db"),
            ),
            ingestion=IngestionConfig(
                call_timeout=get_env("CW_CALL_TIMEOUT", 60.0),
                embedding_failure_fatal=get_env("CW_EMBEDDING_FAILURE_FATAL", False),
                palette=ingestion_defaults.palette,
                normalize_labels=get_env("CW_NORMALIZE_LABELS", False),
                max_concepts=get_env("CW_MAX_CONCEPTS", 10),
                max_connections=get_env("CW_MAX_CONNECTIONS", 5),
                url_marker_tag=get_env("CW_URL_MARKER_TAG", "url"),
                max_input_tokens=get_env("CW_MAX_INPUT_TOKENS", 8000),
                similarity_scan_limit=get_env("CW_SIMILARITY_SCAN_LIMIT", 1000),
            ),
            url_extractor=URLExtractorConfig(
                timeout=get_env("CW_URL_TIMEOUT", 30.0),
                user_agent=get_env("CW_URL_USER_AGENT", URLExtractorConfig().user_agent),
            ),
            tokenizer=TokenizerConfig(
                provider=get_env("CW_TOKENIZER_PROVIDER", "tiktoken"),
                model=get_env("CW_TOKENIZER_MODEL", "cl100k_base"),
            ),
            logging=LoggingConfig(
                level=get_env("CW_LOG_LEVEL", "INFO"),
                log_to_file=get_env("CW_LOG_TO_FILE", True),
                log_dir=get_env("CW_LOG_DIR", "logs"),
                file_rotation=get_env("CW_LOG_FILE_ROTATION", "10 MB"),
                file_retention=get_env("CW_LOG_FILE_RETENTION", "7 days"),
                compression=get_env("CW_LOG_COMPRESSION", "zip"),
                serialize=get_env("CW_LOG_SERIALIZE", True),
            ),
        )

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

        env_config = cls.from_env(env_file=env_file)

        final_dict = {**config_dict}

        # Apply env overrides (non-default sections only)
        default = cls()
        for section in (
            "llm",
            "embedder",
            "storage",
            "ingestion",
            "url_extractor",
            "tokenizer",
            "logging",
        ):
            env_section = getattr(env_config, section)
            if env_section != getattr(default, section):
                final_dict[section] = env_section.model_dump()

        return cls(**final_dict) if final_dict else env_config


# Default config instance
default_config = Config()
