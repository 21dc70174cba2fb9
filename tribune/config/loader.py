"""Configuration loader."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from .models import CategoryConfig, ConfigModel, SourceConfig

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "tribune"


class Config:
    """Configuration manager."""

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """Initialize config manager."""
        if config_path is None:
            config_path = DEFAULT_CONFIG_DIR / "config.yaml"
        self.config_path = config_path
        self._config: Optional[ConfigModel] = None

    @property
    def config(self) -> ConfigModel:
        """Get loaded config."""
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    @property
    def sources_path(self) -> Path:
        return self.config_path.parent / "sources.yaml"

    @property
    def categories_path(self) -> Path:
        return self.config_path.parent / "categories.yaml"

    def get_db_config(self) -> Dict[str, Any]:
        """Get database configuration dict."""
        db_config = self.config.postgres.model_dump()

        # Handle password from environment if specified
        if db_config.get("password_env"):
            password = os.environ.get(db_config["password_env"])
            if password:
                db_config["password"] = password

        return db_config


def load_config(config_path: Path) -> ConfigModel:
    """Load configuration from YAML file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path) as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            config_data = {}

        return ConfigModel(**config_data)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}")
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}")


def _load_entries(path: Path, key: str, model: Type[T]) -> List[T]:
    if not path.exists():
        raise FileNotFoundError(f"{key.title()} file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {key} file: {e}")

    if data is None or key not in data:
        return []

    entries = []
    for entry in data[key] or []:
        try:
            entries.append(model(**entry))
        except (ValidationError, TypeError) as e:
            name = entry.get("name", "unknown") if isinstance(entry, dict) else "unknown"
            logger.warning("Skipping invalid %s entry %s: %s", key, name, e)
    return entries


def load_sources(sources_path: Path) -> List[SourceConfig]:
    """Load sources from YAML file."""
    return _load_entries(sources_path, "sources", SourceConfig)


def load_categories(categories_path: Path) -> List[CategoryConfig]:
    """Load category rules from YAML file."""
    return _load_entries(categories_path, "categories", CategoryConfig)


def _dump(data: Dict[str, Any], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)


def save_config(config: ConfigModel, config_path: Path) -> None:
    """Save configuration to YAML file."""
    _dump(config.model_dump(mode="json"), config_path)


def save_sources(sources: List[SourceConfig], sources_path: Path) -> None:
    """Save sources to YAML file."""
    _dump(
        {"sources": [s.model_dump(mode="json", exclude_none=True) for s in sources]},
        sources_path,
    )


def save_categories(categories: List[CategoryConfig], categories_path: Path) -> None:
    """Save categories to YAML file."""
    _dump(
        {"categories": [c.model_dump(mode="json", exclude_none=True) for c in categories]},
        categories_path,
    )
