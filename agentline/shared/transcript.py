"""Transcript loading — JSON message lists into Message records.

Accepts the shapes conversation stores commonly export: role labels in any
case, tool calls either flat (``{"id", "name", "arguments"}``) or OpenAI-style
(``{"id", "function": {"name", "arguments"}}``), and arguments as a JSON
string or an already-decoded object.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from agentline.engine.errors import TranscriptLoadError
from agentline.shared.models.message import Attachment, Message, MessageRole, ToolCall
from agentline.shared.normalize import coerce_text

logger = logging.getLogger(__name__)


def _tool_call_from_dict(raw: Any) -> ToolCall | None:
    if not isinstance(raw, dict):
        return None
    function = raw.get("function")
    if isinstance(function, dict):
        name = function.get("name")
        arguments = function.get("arguments")
    else:
        name = raw.get("name")
        arguments = raw.get("arguments", raw.get("input"))
    return ToolCall(
        id=coerce_text(raw.get("id")),
        name=coerce_text(name),
        arguments=coerce_text(arguments),
    )


def _attachment_from_dict(raw: Any) -> Attachment | None:
    if isinstance(raw, str):
        return Attachment(name=raw)
    if not isinstance(raw, dict):
        return None
    return Attachment(
        name=coerce_text(raw.get("name")),
        mime_type=coerce_text(raw.get("mime_type")),
        data=coerce_text(raw.get("data")),
    )


def message_from_dict(raw: dict[str, Any]) -> Message | None:
    """Build one Message; returns None for entries with an unknown role."""
    role = MessageRole.parse(raw.get("role"))
    if role is None:
        logger.warning("Skipping transcript entry with unknown role %r", raw.get("role"))
        return None
    tool_calls = [
        tc for tc in (_tool_call_from_dict(c) for c in raw.get("tool_calls") or [])
        if tc is not None
    ]
    attachments = [
        a for a in (_attachment_from_dict(x) for x in raw.get("attachments") or [])
        if a is not None
    ]
    tool_call_id = raw.get("tool_call_id")
    return Message(
        role=role,
        content=coerce_text(raw.get("content")),
        tool_calls=tool_calls,
        tool_call_id=coerce_text(tool_call_id) if tool_call_id is not None else None,
        attachments=attachments,
    )


def messages_from_dicts(data: Any, source: str = "<data>") -> list[Message]:
    """Convert a decoded JSON document into an ordered message list."""
    if isinstance(data, dict) and isinstance(data.get("messages"), list):
        data = data["messages"]
    if not isinstance(data, list):
        raise TranscriptLoadError(source, "expected a list of messages")
    messages: list[Message] = []
    for position, entry in enumerate(data):
        if not isinstance(entry, dict):
            logger.warning("Skipping non-object transcript entry at %d in %s", position, source)
            continue
        msg = message_from_dict(entry)
        if msg is not None:
            messages.append(msg)
    return messages


def load_transcript(path: str | Path) -> list[Message]:
    """Read a JSON transcript file."""
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise TranscriptLoadError(str(path), str(exc)) from exc
    except json.JSONDecodeError as exc:
        raise TranscriptLoadError(str(path), f"invalid JSON: {exc}") from exc
    messages = messages_from_dicts(raw, source=str(path))
    logger.info("Loaded %d messages from %s", len(messages), path)
    return messages
