"""Exception hierarchy for the I/O edges of agentline.

The reconstruction engine itself never raises; only transcript loading and
configuration do.
"""
from __future__ import annotations


class AgentlineError(Exception):
    """Base exception for all agentline errors."""


class TranscriptLoadError(AgentlineError):
    """A transcript file could not be read or has the wrong shape."""
    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot load transcript {source}: {reason}")


class ConfigError(AgentlineError):
    """A configuration file is missing or malformed."""
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid config {path}: {reason}")
