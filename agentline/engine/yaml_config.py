"""YAML configuration loader.

Reads the ``activity`` section of a YAML file into an ActivityConfig, on top
of the AGENTLINE_* environment defaults.

Example YAML:
    activity:
      tool_result_max_chars: 2000
      generic_description_max_chars: 120
      loading_text: "Thinking..."
      include_system_messages: true
      recent_message_window: 3
      suggestion_limit: 20
      log_level: DEBUG
"""
from __future__ import annotations

import logging
from dataclasses import fields
from pathlib import Path

import yaml

from .config import ActivityConfig
from .errors import ConfigError

logger = logging.getLogger(__name__)


def load_yaml_config(path: str | Path) -> ActivityConfig:
    """Load and parse a YAML config file."""
    path = Path(path)
    logger.info(
        "load_yaml_config: loading config from %s (exists=%s)",
        path, path.exists(),
    )
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except FileNotFoundError as exc:
        logger.error("load_yaml_config: config file not found at %s", path.absolute())
        raise ConfigError(str(path), "file not found") from exc
    except yaml.YAMLError as exc:
        logger.error("load_yaml_config: YAML parse error in %s: %s", path, exc)
        raise ConfigError(str(path), f"YAML parse error: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(str(path), "top level must be a mapping")

    section = raw.get("activity") or {}
    if not isinstance(section, dict):
        raise ConfigError(str(path), "'activity' must be a mapping")

    config = ActivityConfig.from_env()
    known = {f.name for f in fields(ActivityConfig)}
    for key, value in section.items():
        if key not in known:
            logger.warning("load_yaml_config: ignoring unknown key activity.%s", key)
            continue
        default = getattr(config, key)
        if isinstance(default, bool):
            if not isinstance(value, bool):
                raise ConfigError(str(path), f"activity.{key} must be a boolean")
        elif isinstance(default, int):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(str(path), f"activity.{key} must be an integer")
        elif isinstance(default, str):
            value = str(value)
        setattr(config, key, value)

    config.log_level = config.log_level.upper()
    logger.debug("load_yaml_config: loaded %s", config)
    return config
