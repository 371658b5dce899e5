"""Transcript message and tool call models."""

from dataclasses import dataclass, field
from enum import Enum


class MessageRole(Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    TOOL = "tool"

    @classmethod
    def parse(cls, value: str | None) -> "MessageRole | None":
        """Map a role label (``"User"``, ``"assistant"``...) to a role."""
        if isinstance(value, MessageRole):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class ToolCall:
    id: str
    name: str
    # Serialized payload, usually JSON but not guaranteed to parse.
    arguments: str = ""


@dataclass(frozen=True)
class Attachment:
    name: str
    mime_type: str = ""
    data: str = ""


@dataclass(frozen=True)
class Message:
    role: MessageRole
    content: str = ""
    tool_calls: list[ToolCall] = field(default_factory=list)
    # Set only on tool-role messages; references the ToolCall that produced them.
    tool_call_id: str | None = None
    attachments: list[Attachment] = field(default_factory=list)
