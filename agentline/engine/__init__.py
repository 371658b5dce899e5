"""Activity reconstruction engine — transcript in, turn-grouped timeline out."""
from .config import ActivityConfig
from .errors import AgentlineError, ConfigError, TranscriptLoadError
from .status import AgentStatus, StatusInfo, infer_status, status_from_messages
from .turn_builder import TurnBuilder, build_turns
from .yaml_config import load_yaml_config

__all__ = [
    # Config
    "ActivityConfig",
    "load_yaml_config",
    # Errors
    "AgentlineError",
    "ConfigError",
    "TranscriptLoadError",
    # Reconstruction
    "TurnBuilder",
    "build_turns",
    # Status
    "AgentStatus",
    "StatusInfo",
    "infer_status",
    "status_from_messages",
]
