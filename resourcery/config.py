"""
Config system - Layered configuration for the resource engine.

Merge precedence (later overrides earlier):
defaults < config files (JSON/YAML) < .env file < environment variables < overrides
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from dotenv import dotenv_values

from . import inflector
from .faults import ConfigInvalidFault

logger = logging.getLogger("resourcery.config")

__all__ = [
    "ResourceConfig",
    "ConfigLoader",
    "configure",
    "get_config",
]

KEY_TYPES = ("integer", "string", "uuid")


@dataclass
class ResourceConfig:
    """
    Engine-wide settings.

    Attributes:
        default_key_type: Key type for resources that don't declare one
        warn_on_reserved_names: Log a warning when a type, attribute or
            relationship uses a reserved name
        inflections: ``{"uncountable": [...], "irregular": {singular: plural}}``
    """

    default_key_type: Union[str, Callable[..., Any]] = "integer"
    warn_on_reserved_names: bool = True
    inflections: Dict[str, Any] = field(default_factory=dict)

    def validate(self) -> None:
        key_type = self.default_key_type
        if not callable(key_type) and key_type not in KEY_TYPES:
            raise ConfigInvalidFault(
                "default_key_type",
                f"expected one of {', '.join(KEY_TYPES)} or a callable, got {key_type!r}",
            )
        irregular = self.inflections.get("irregular", {})
        if not isinstance(irregular, dict):
            raise ConfigInvalidFault("inflections.irregular", "expected a mapping of singular to plural")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ResourceConfig:
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(sorted(unknown))}")
        return cls(**{k: v for k, v in data.items() if k in known})


class ConfigLoader:
    """
    Loads and merges configuration from multiple sources.

    Environment variables use the ``RESOURCERY_`` prefix and ``__`` for
    nesting: ``RESOURCERY_INFLECTIONS__UNCOUNTABLE='["preferences"]'``.
    """

    def __init__(self, env_prefix: str = "RESOURCERY_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        paths: Optional[List[str]] = None,
        env_prefix: str = "RESOURCERY_",
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> ConfigLoader:
        """
        Load configuration from multiple sources with proper merge strategy.

        Args:
            paths: Config file paths (glob patterns supported)
            env_prefix: Prefix for environment variables
            env_file: Path to .env file
            overrides: Manual overrides (highest precedence)

        Returns:
            Configured ConfigLoader instance
        """
        loader = cls(env_prefix=env_prefix)

        for pattern in paths or []:
            loader._load_from_files(pattern)

        if env_file:
            loader._load_env_file(env_file)

        loader._load_from_env()

        if overrides:
            loader._merge_dict(loader.config_data, overrides)

        return loader

    def _load_from_files(self, pattern: str):
        """Load config from JSON or YAML files."""
        from glob import glob

        for path_str in sorted(glob(pattern)):
            path = Path(path_str)
            if path.suffix == ".json":
                self._load_json_file(path)
            elif path.suffix in (".yaml", ".yml"):
                self._load_yaml_file(path)
            else:
                logger.warning(f"Skipping config file with unknown suffix: {path}")

    def _load_json_file(self, path: Path):
        with open(path) as f:
            data = json.load(f)
            self._merge_dict(self.config_data, data)

    def _load_yaml_file(self, path: Path):
        import yaml
        with open(path) as f:
            data = yaml.safe_load(f)
            if data:
                self._merge_dict(self.config_data, data)

    def _load_env_file(self, path: str):
        """Load prefixed keys from a .env file."""
        if not Path(path).exists():
            return
        for key, value in dotenv_values(path).items():
            if key.startswith(self.env_prefix) and value is not None:
                self._set_nested(key, value)

    def _load_from_env(self):
        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                self._set_nested(key, value)

    def _set_nested(self, key: str, value: str):
        """Convert RESOURCERY_INFLECTIONS__UNCOUNTABLE to a nested dict."""
        key = key[len(self.env_prefix):]
        parts = key.lower().split("__")

        current = self.config_data
        for part in parts[:-1]:
            if part not in current:
                current[part] = {}
            current = current[part]

        current[parts[-1]] = self._parse_value(value)

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        if value.lower() in ("true", "yes", "1"):
            return True
        if value.lower() in ("false", "no", "0"):
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
        """Deep merge source into target."""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._merge_dict(target[key], value)
            else:
                target[key] = value

    def get(self, path: str, default: Any = None) -> Any:
        """Get config value by dot-separated path."""
        current = self.config_data
        for part in path.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current

    def to_config(self) -> ResourceConfig:
        config = ResourceConfig.from_dict(self.config_data)
        config.validate()
        return config


_config = ResourceConfig()


def configure(config: Optional[ResourceConfig] = None, **overrides: Any) -> ResourceConfig:
    """
    Install the active configuration and apply its inflection rules.

    ``configure(default_key_type="uuid")`` is shorthand for building a
    ``ResourceConfig`` from keyword arguments.
    """
    global _config

    if config is None:
        config = ResourceConfig(**overrides)
    config.validate()

    inflections = config.inflections
    inflector.uncountable(*inflections.get("uncountable", []))
    for singular, plural in inflections.get("irregular", {}).items():
        inflector.irregular(singular, plural)

    _config = config
    logger.debug(f"Configured resource engine: default_key_type={config.default_key_type!r}")
    return config


def get_config() -> ResourceConfig:
    return _config
