"""Application configuration module."""
import os
from pathlib import Path
from typing import Any, Dict, Optional, List
import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

from ..models.frontier_model import DepthResetPolicy

# Load environment variables from .env
load_dotenv()


class CorpusSettings(BaseModel):
    """Corpus directory settings."""
    model_config = ConfigDict(validate_assignment=True)
    directory: Path = Field(
        default=Path(os.getenv("CORPUS_DIR", "webids")),
        description="Directory holding accepted profile documents"
    )
    suffix: str = Field(
        default=os.getenv("CORPUS_SUFFIX", ".ttl"),
        description="File suffix of corpus entries"
    )
    create_if_missing: bool = Field(
        default=os.getenv("CORPUS_CREATE_IF_MISSING", "true").lower() == "true",
        description="Create the corpus directory on start-up if absent"
    )


class CrawlerSettings(BaseModel):
    """Crawler specific settings."""
    model_config = ConfigDict(validate_assignment=True)
    max_concurrent_requests: int = Field(
        default=int(os.getenv("MAX_CONCURRENT_REQUESTS", "100")),
        ge=1,
        description="Maximum fetches in flight at once"
    )
    max_depth: int = Field(
        default=int(os.getenv("MAX_DEPTH", "3")),
        ge=0,
        description="Neighbors are expanded only while depth is below this"
    )
    request_timeout: float = Field(
        default=float(os.getenv("REQUEST_TIMEOUT", "30")),
        gt=0,
        description="Request timeout in seconds"
    )
    accept_header: str = Field(
        default=os.getenv("ACCEPT_HEADER", "text/turtle"),
        description="Accept header sent with every profile fetch"
    )
    user_agent: str = Field(
        default=os.getenv("USER_AGENT", "webidcrawl/0.1"),
        description="User-Agent header sent with every request"
    )
    depth_reset_policy: DepthResetPolicy = Field(
        default=DepthResetPolicy(os.getenv("DEPTH_RESET_POLICY", "accepted_only")),
        description="When a neighbor's depth restarts at zero"
    )


class CatalogSettings(BaseModel):
    """Remote catalog of known WebIDs."""
    model_config = ConfigDict(validate_assignment=True)
    location: Optional[str] = Field(
        default=os.getenv("CATALOG_LOCATION") or None,
        description="URL or local path of a JSON catalog"
    )
    timeout: float = Field(
        default=float(os.getenv("CATALOG_TIMEOUT", "30")),
        gt=0,
        description="Catalog request timeout in seconds"
    )


class ExportSettings(BaseModel):
    """Settings for the corpus export step."""
    model_config = ConfigDict(validate_assignment=True)
    output_dir: Path = Field(
        default=Path(os.getenv("EXPORT_DIR", "public")),
        description="Directory receiving profiles.json and profiles.ttl"
    )


class CrawlerYamlConfig(BaseModel):
    """Structure for the YAML configuration file."""
    default_settings: Optional[Dict[str, Any]] = None
    seeds: List[str] = Field(default_factory=list)
    corpus: Optional[Dict[str, Any]] = None
    catalog: Optional[Dict[str, Any]] = None
    export: Optional[Dict[str, Any]] = None


class Settings(BaseSettings):
    """Application settings."""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix=""
    )

    # Environment
    environment: str = Field(
        default=os.getenv("ENVIRONMENT", "development"),
        description="Application environment"
    )
    debug: bool = Field(
        default=os.getenv("DEBUG", "false").lower() == "true",
        description="Debug mode"
    )

    corpus: CorpusSettings = Field(default_factory=CorpusSettings)
    crawler: CrawlerSettings = Field(default_factory=CrawlerSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)

    # Crawler configuration from YAML
    crawler_config: CrawlerYamlConfig = Field(default_factory=CrawlerYamlConfig)

    # Logging
    log_level: str = Field(
        default=os.getenv("LOG_LEVEL", "info"),
        description="Minimum console log level"
    )
    logfire_enabled: bool = Field(True, description="Enable Logfire logging")

    @classmethod
    def find_config_file(cls) -> Optional[Path]:
        """Find the configuration file in various locations."""
        possible_paths = [
            Path("config/crawler_config.yaml"),
            Path("crawler_config.yaml"),
            Path.home() / ".config" / "webidcrawl" / "crawler_config.yaml",
        ]

        for path in possible_paths:
            if path.exists():
                return path
        return None

    @classmethod
    def from_yaml(cls, yaml_file: Optional[Path] = None) -> "Settings":
        """
        Load settings from YAML file or environment variables.

        Args:
            yaml_file: Explicit configuration file; standard locations are
                searched when omitted

        Returns:
            Settings with YAML sections applied over environment defaults
        """
        config_data = {}

        if yaml_file is None:
            yaml_file = cls.find_config_file()

        if yaml_file and yaml_file.exists():
            try:
                with yaml_file.open() as f:
                    yaml_config = yaml.safe_load(f)
                    if yaml_config and isinstance(yaml_config, dict):
                        crawler_config = CrawlerYamlConfig(**yaml_config.get('crawler', {}))
                        config_data['crawler_config'] = crawler_config
            except Exception as e:
                raise ValueError(f"Error loading YAML configuration: {str(e)}")

        instance = cls(**config_data)

        # Only keys actually present in the YAML override the env defaults
        yaml_config = instance.crawler_config
        if yaml_config.default_settings:
            instance.crawler = _merge(instance.crawler, yaml_config.default_settings)
        if yaml_config.corpus:
            instance.corpus = _merge(instance.corpus, yaml_config.corpus)
        if yaml_config.catalog:
            instance.catalog = _merge(instance.catalog, yaml_config.catalog)
        if yaml_config.export:
            instance.export = _merge(instance.export, yaml_config.export)

        return instance

    def get_seeds(self) -> List[str]:
        """Get list of seeds configured in YAML."""
        return list(self.crawler_config.seeds)


def _merge(model: BaseModel, overrides: Dict[str, Any]) -> BaseModel:
    data = model.model_dump()
    data.update(overrides)
    return type(model)(**data)


def get_settings(yaml_file: Optional[Path] = None) -> Settings:
    """Get application settings."""
    return Settings.from_yaml(yaml_file)


# Settings singleton
settings = get_settings()
