"""Configuration management for Tribune."""

from .loader import (
    Config,
    load_categories,
    load_config,
    load_sources,
    save_categories,
    save_config,
    save_sources,
)
from .models import (
    CategoryConfig,
    ConfigModel,
    ExtractionConfig,
    IngestionConfig,
    SourceConfig,
    slugify,
)

__all__ = [
    "CategoryConfig",
    "Config",
    "ConfigModel",
    "ExtractionConfig",
    "IngestionConfig",
    "SourceConfig",
    "load_categories",
    "load_config",
    "load_sources",
    "save_categories",
    "save_config",
    "save_sources",
    "slugify",
]
