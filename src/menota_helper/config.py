"""
Configuration management for menota-helper.

Handles loading configuration from a YAML file and environment variables on
top of built-in defaults.
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .core.tags import DEFAULT_TAGS, TagSettings

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class MenotaConfig:
    """Main configuration for menota-helper."""

    # Tag names used by the engine
    tags: TagSettings = field(default_factory=lambda: DEFAULT_TAGS)

    # Logging
    log_level: str = "WARNING"

    # Look up the previous <lb> in the paragraph holding the cursor only
    paragraph_scoped_line_breaks: bool = False

    # File paths
    default_output_dir: Optional[Path] = None


class ConfigManager:
    """Manages configuration from multiple sources."""

    def __init__(self, config_file: Optional[Path] = None):
        env_file = os.getenv("MENOTA_HELPER_CONFIG")
        if config_file is None and env_file:
            config_file = Path(env_file)
        self.config_file = config_file or Path.home() / ".menota-helper" / "config.yaml"
        self.config_dir = self.config_file.parent
        self._config: Optional[MenotaConfig] = None

    def load_config(self) -> MenotaConfig:
        """Load configuration from all sources."""
        if self._config:
            return self._config

        config = MenotaConfig()

        if self.config_file.exists():
            config = self._merge_configs(config, self._load_from_file())

        config = self._merge_configs(config, self._load_from_env())

        self._config = config
        return config

    def _load_from_file(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not load config file {self.config_file}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring config file {self.config_file}: expected a mapping")
            return {}
        return data

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: Dict[str, Any] = {}

        log_level = os.getenv("MENOTA_HELPER_LOG_LEVEL")
        if log_level:
            env_config["log_level"] = log_level

        inline_tags = os.getenv("MENOTA_HELPER_INLINE_TAGS")
        if inline_tags:
            env_config.setdefault("tags", {})["inline_tags"] = [
                tag.strip() for tag in inline_tags.split(",") if tag.strip()
            ]

        scoped = os.getenv("MENOTA_HELPER_PARAGRAPH_SCOPED_LB")
        if scoped:
            env_config["paragraph_scoped_line_breaks"] = scoped.lower() in ("true", "1", "yes", "on")

        return env_config

    def _merge_configs(self, base: MenotaConfig, override: Dict[str, Any]) -> MenotaConfig:
        """Merge a configuration dictionary over a config object."""
        if "tags" in override and isinstance(override["tags"], dict):
            known = {f.name for f in fields(TagSettings)}
            tag_overrides = {}
            for key, value in override["tags"].items():
                if key not in known:
                    logger.warning(f"Ignoring unknown tag setting: {key}")
                    continue
                if key in ("skip_tags", "inline_tags"):
                    if isinstance(value, str):
                        value = [value]
                    if not isinstance(value, (list, tuple)):
                        logger.warning(f"Ignoring tag setting {key}: expected a list, got {value!r}")
                        continue
                    value = tuple(str(tag) for tag in value)
                elif not isinstance(value, str) or not value:
                    logger.warning(f"Ignoring tag setting {key}: expected a tag name, got {value!r}")
                    continue
                tag_overrides[key] = value
            base.tags = replace(base.tags, **tag_overrides)

        if "log_level" in override:
            level = str(override["log_level"]).upper()
            if level in LOG_LEVELS:
                base.log_level = level
            else:
                logger.warning(f"Ignoring invalid log level: {override['log_level']}")

        if "paragraph_scoped_line_breaks" in override:
            base.paragraph_scoped_line_breaks = bool(override["paragraph_scoped_line_breaks"])

        if override.get("default_output_dir"):
            base.default_output_dir = Path(override["default_output_dir"])

        return base

    def save_config(self, config: MenotaConfig) -> None:
        """Save configuration to file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        tags = asdict(config.tags)
        tags["skip_tags"] = list(config.tags.skip_tags)
        tags["inline_tags"] = list(config.tags.inline_tags)

        config_dict: Dict[str, Any] = {
            "tags": tags,
            "log_level": config.log_level,
            "paragraph_scoped_line_breaks": config.paragraph_scoped_line_breaks,
        }
        if config.default_output_dir:
            config_dict["default_output_dir"] = str(config.default_output_dir)

        with open(self.config_file, "w", encoding="utf-8") as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False, indent=2, sort_keys=False)

    def create_default_config(self) -> Path:
        """Create a default configuration file."""
        self.save_config(MenotaConfig())
        return self.config_file

    def get_config_info(self) -> Dict[str, Any]:
        """Get information about current configuration."""
        config = self.load_config()

        return {
            "config_file": str(self.config_file),
            "config_exists": self.config_file.exists(),
            "log_level": config.log_level,
            "paragraph_scoped_line_breaks": config.paragraph_scoped_line_breaks,
            "inline_tags": list(config.tags.inline_tags),
            "skip_tags": list(config.tags.skip_tags),
        }


# Global config manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get the global config manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config() -> MenotaConfig:
    """Load the current configuration."""
    return get_config_manager().load_config()
