"""
Config system - Layered configuration with typed sections.

Sources, later overriding earlier:
defaults < config files (YAML/JSON) < .env file < MODALIS_* environment < overrides
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from glob import glob
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from dotenv import dotenv_values

from .faults import ConfigInvalidFault


# ============================================================================
# Typed sections
# ============================================================================

DEFAULT_EDITOR_STYLES: Tuple[str, ...] = (
    "wp-edit-blocks",
    "wp-block-editor",
    "wp-editor",
    "wp-edit-post",
    "wp-block-editor-content",
    "wp-editor-classic-layout-styles",
    "wp-format-library",
    "wp-components",
    "wp-commands",
    "wp-preferences",
    "wp-nux",
    "wp-widgets",
    "wp-edit-widgets",
    "wp-customize-widgets",
    "wp-edit-site",
    "wp-list-reusable-blocks",
    "wp-reusable-blocks",
    "wp-patterns",
    "kadence-editor-global",
    "kadence-blocks-global-editor-styles",
)

DEFAULT_EDITOR_PREFIXES: Tuple[str, ...] = (
    "wp-edit-",
    "wp-block-editor",
    "wp-editor",
    "kadence-editor",
    "kadence-blocks-global-editor",
)


@dataclass
class AssetConfig:
    """Asset discovery / materialization settings."""
    base_url: str = ""
    content_url: str = ""
    # Handles the host page always ships itself
    baseline_exclusions: Tuple[str, ...] = ("wp-block-library", "global-styles")
    editor_styles: Tuple[str, ...] = DEFAULT_EDITOR_STYLES
    editor_prefixes: Tuple[str, ...] = DEFAULT_EDITOR_PREFIXES
    variation_handle: str = "block-style-variation-styles"
    include_dependencies: bool = True


@dataclass
class RenderConfig:
    """Fragment renderer settings."""
    block_supports_context: str = "block-supports"
    max_fragment_id: int = 2147483647
    default_title: str = "Popup"


@dataclass
class GalleryConfig:
    """Gallery settings normalisation."""
    default_modal_width: int = 600
    min_modal_width: int = 100
    close_button_modes: Tuple[str, ...] = ("icon", "button", "both")
    navigation_modes: Tuple[str, ...] = ("image", "footer", "both")
    default_close_button_mode: str = "both"
    default_navigation_mode: str = "both"


# ============================================================================
# Loader
# ============================================================================

class ConfigLoader:
    """
    Loads and merges configuration from multiple sources with precedence:
    overrides > environment variables > .env file > config files > defaults
    """

    def __init__(self, env_prefix: str = "MODALIS_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        paths: Optional[list[str]] = None,
        env_prefix: str = "MODALIS_",
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "ConfigLoader":
        """
        Load configuration from multiple sources with proper merge strategy.

        Args:
            paths: Config file paths (glob patterns supported, .yaml/.yml/.json)
            env_prefix: Prefix for environment variables
            env_file: Path to .env file
            overrides: Manual overrides (highest precedence)

        Returns:
            Configured ConfigLoader instance
        """
        loader = cls(env_prefix=env_prefix)

        for pattern in paths or ():
            loader._load_from_files(pattern)

        if env_file:
            loader._load_env_file(env_file)

        loader._load_from_env()

        if overrides:
            loader._merge_dict(loader.config_data, overrides)

        return loader

    def _load_from_files(self, pattern: str):
        """Merge every ``.json``/``.yaml``/``.yml`` file matching ``pattern``, sorted by path."""
        for path in map(Path, sorted(glob(pattern))):
            if path.suffix in (".json", ".yaml", ".yml"):
                self._load_file(path)

    def _load_file(self, path: Path):
        with open(path, encoding="utf-8") as f:
            if path.suffix == ".json":
                data = json.load(f)
            else:
                import yaml
                data = yaml.safe_load(f)
        if data:
            self._merge_dict(self.config_data, data)

    def _load_env_file(self, path: str):
        """Load prefixed keys from a .env file."""
        if not Path(path).exists():
            return
        for key, value in dotenv_values(path).items():
            if value is not None and key.startswith(self.env_prefix):
                self._set_nested(key, value)

    def _load_from_env(self):
        """Process environment, ``MODALIS_`` keys only."""
        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                self._set_nested(key, value)

    def _set_nested(self, key: str, value: str):
        """Convert MODALIS_CACHE__DEFAULT_TTL to nested dict."""
        key = key[len(self.env_prefix):]

        # Double underscore separates nesting levels
        parts = key.lower().split("__")

        current = self.config_data
        for part in parts[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]

        current[parts[-1]] = self._parse_value(value)

    def _parse_value(self, value: str) -> Any:
        """Coerce an env string to bool, int, float or JSON where it looks like one."""
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        if value.startswith(("{", "[")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value

    def _merge_dict(self, target: dict, source: dict):
        """Recursively merge ``source`` into ``target``; nested dicts merge, anything else is replaced."""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._merge_dict(target[key], value)
            else:
                target[key] = value

    def get(self, path: str, default: Any = None) -> Any:
        """Value at a dotted path such as ``cache.default_ttl``, else ``default``."""
        current: Any = self.config_data
        for part in path.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current

    def to_dict(self) -> dict:
        return self.config_data

    # ── Sections ─────────────────────────────────────────────────────

    def get_cache_config(self) -> dict:
        """
        Get cache configuration with defaults.

        Returns:
            Cache configuration dictionary
        """
        defaults = {
            "enabled": True,
            "fast_backend": "memory",
            "durable_backend": "memory",
            "default_ttl": 12 * 60 * 60,
            "ttl_override": None,
            "fragment_object_ttl": 300,
            "namespace": "modalis",
            "key_prefix": "modalis:",
            "max_size": 10000,
            "eviction_policy": "lru",
            "serializer": "json",
            "redis_url": "redis://localhost:6379/0",
            "redis_max_connections": 10,
            "redis_socket_timeout": 5.0,
            "redis_socket_connect_timeout": 5.0,
            "log_level": "WARNING",
        }
        merged = defaults.copy()
        self._merge_dict(merged, self.get("cache", {}) or {})
        return merged

    def get_asset_config(self) -> AssetConfig:
        data = self.get("assets", {}) or {}
        config = AssetConfig()
        for key, value in data.items():
            if not hasattr(config, key):
                raise ConfigInvalidFault(f"assets.{key}", "unknown setting")
            if isinstance(getattr(config, key), tuple):
                if isinstance(value, str):
                    value = [part.strip() for part in value.split(",") if part.strip()]
                value = tuple(value)
            setattr(config, key, value)
        return config

    def get_render_config(self) -> RenderConfig:
        data = self.get("render", {}) or {}
        config = RenderConfig()
        for key, value in data.items():
            if not hasattr(config, key):
                raise ConfigInvalidFault(f"render.{key}", "unknown setting")
            setattr(config, key, value)
        if not isinstance(config.max_fragment_id, int) or config.max_fragment_id <= 0:
            raise ConfigInvalidFault("render.max_fragment_id", "must be a positive integer")
        return config

    def get_gallery_config(self) -> GalleryConfig:
        data = self.get("gallery", {}) or {}
        config = GalleryConfig()
        for key, value in data.items():
            if not hasattr(config, key):
                raise ConfigInvalidFault(f"gallery.{key}", "unknown setting")
            if isinstance(getattr(config, key), tuple):
                value = tuple(value)
            setattr(config, key, value)
        return config


def configure_logging(level: str = "WARNING") -> None:
    """Apply a level to the ``modalis`` logger tree."""
    logging.getLogger("modalis").setLevel(level.upper())


__all__ = [
    "AssetConfig",
    "ConfigLoader",
    "DEFAULT_EDITOR_PREFIXES",
    "DEFAULT_EDITOR_STYLES",
    "GalleryConfig",
    "RenderConfig",
    "configure_logging",
]
