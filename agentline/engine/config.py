"""Configuration loaded from environment variables.

All settings have sensible defaults. Override via AGENTLINE_* env vars.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer (using %d)", name, raw, default)
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class ActivityConfig:
    """Activity reconstruction configuration."""

    # Tool result text stored on a tool item is capped at this many characters.
    tool_result_max_chars: int = 1400
    # Descriptions for unknown tools are truncated raw argument text.
    generic_description_max_chars: int = 160
    # Placeholder shown for an empty assistant message while streaming.
    loading_text: str = "Agent is preparing the next step..."
    # System messages are left out of the timeline unless enabled.
    include_system_messages: bool = False
    # How many recent user/assistant messages feed status inference.
    recent_message_window: int = 3
    # Max @-mention suggestions returned for the draft input.
    suggestion_limit: int = 10

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> ActivityConfig:
        """Load configuration from AGENTLINE_* environment variables."""
        overrides = {
            k: v for k, v in os.environ.items() if k.startswith("AGENTLINE_")
        }
        if overrides:
            logger.info(
                "ActivityConfig.from_env: AGENTLINE_* env overrides: %s",
                ", ".join(f"{k}={v}" for k, v in sorted(overrides.items())),
            )
        else:
            logger.debug("ActivityConfig.from_env: no AGENTLINE_* env vars set, using defaults")

        return cls(
            tool_result_max_chars=_env_int(
                "AGENTLINE_TOOL_RESULT_MAX_CHARS", cls.tool_result_max_chars,
            ),
            generic_description_max_chars=_env_int(
                "AGENTLINE_DESCRIPTION_MAX_CHARS", cls.generic_description_max_chars,
            ),
            loading_text=os.getenv("AGENTLINE_LOADING_TEXT", cls.loading_text),
            include_system_messages=_env_bool(
                "AGENTLINE_INCLUDE_SYSTEM", cls.include_system_messages,
            ),
            recent_message_window=_env_int(
                "AGENTLINE_RECENT_WINDOW", cls.recent_message_window,
            ),
            suggestion_limit=_env_int(
                "AGENTLINE_SUGGESTION_LIMIT", cls.suggestion_limit,
            ),
            log_level=os.getenv("AGENTLINE_LOG_LEVEL", cls.log_level).upper(),
        )
