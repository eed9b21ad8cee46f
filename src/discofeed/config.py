"""Configuration loading for the Discovery hosts (CLI and TUI)."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from discofeed.exceptions import ConfigError
from discofeed.plugins import DEFAULT_PLUGIN, PluginRegistry
from discofeed.services.catalog import DEFAULT_PAGE_SIZE, CatalogService, sample_catalog

CONFIG_ENV_VAR = "DISCOFEED_CONFIG"
DEFAULT_CONFIG_PATH = Path("config/discofeed.json")


@dataclass
class DiscoveryConfig:
    """Settings for wiring a Discovery session."""

    default_plugin: str = DEFAULT_PLUGIN
    plugins_path: Path | None = None  # None = built-in plugin table
    catalog_path: Path | None = None  # None = generated sample catalog
    page_size: int = DEFAULT_PAGE_SIZE
    latency: float = 0.0  # artificial fetch delay in seconds
    log_dir: Path = Path("logs")

    def __post_init__(self) -> None:
        """Ensure paths are Path objects."""
        if isinstance(self.plugins_path, str):
            self.plugins_path = Path(self.plugins_path)
        if isinstance(self.catalog_path, str):
            self.catalog_path = Path(self.catalog_path)
        if isinstance(self.log_dir, str):
            self.log_dir = Path(self.log_dir)

    def build_registry(self) -> PluginRegistry:
        if self.plugins_path is None:
            return PluginRegistry.builtin()
        return PluginRegistry.from_json(self.plugins_path)

    def build_catalog(self) -> CatalogService:
        if self.catalog_path is None:
            return CatalogService(sample_catalog(), page_size=self.page_size, latency=self.latency)
        return CatalogService.from_json(
            self.catalog_path, page_size=self.page_size, latency=self.latency
        )


def load_config(config_path: Path | None = None) -> DiscoveryConfig:
    """Load configuration from JSON, falling back to defaults.

    Reads *config_path*, else the file named by ``$DISCOFEED_CONFIG``, else
    ``config/discofeed.json``. A missing file yields defaults; unknown keys
    are ignored.

    Raises:
        ConfigError: If the file exists but is not a JSON object, or a value
            has the wrong type.
    """
    if config_path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        config_path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return DiscoveryConfig()

    try:
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Cannot read config {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_path} must contain a JSON object")

    field_names = set(DiscoveryConfig.__dataclass_fields__)
    kwargs = {k: v for k, v in data.items() if k in field_names}

    try:
        config = DiscoveryConfig(**kwargs)
        config.page_size = int(config.page_size)
        config.latency = float(config.latency)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid value in {config_path}: {exc}") from exc

    if config.page_size < 1:
        raise ConfigError(f"page_size must be positive in {config_path}")
    return config
