"""Status inference — one coarse "what is the agent doing" label per recomputation.

Rules are evaluated in a fixed priority order while a response is streaming:

    waiting → testing → executing → researching → planning → implementing
    → the active mode's default

Tool names map to statuses through a keyword table (substring match), coarser
than the display categories of the tool summarizer.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Sequence

from agentline.shared.models.message import Message, MessageRole, ToolCall
from agentline.shared.normalize import coerce_text
from agentline.shared.patterns import legacy_tool_names

from .config import ActivityConfig


class AgentStatus(Enum):
    PLANNING = "planning"
    RESEARCHING = "researching"
    IMPLEMENTING = "implementing"
    EXECUTING = "executing"
    TESTING = "testing"
    WAITING = "waiting"
    RESPONDING = "responding"
    DONE = "done"


@dataclass(frozen=True)
class StatusInfo:
    status: AgentStatus
    message: str
    detail: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status.value, "message": self.message, "detail": self.detail}


TEST_COMMAND = re.compile(
    r"\b(?:npm|pnpm|yarn)\s+test\b|\bcargo\s+test\b|\bpytest\b|\bvitest\b|\bjest\b|\bgo\s+test\b",
    re.IGNORECASE,
)
COMMAND_INTENT: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b(run|execute|command|terminal|bash|shell)\b", re.IGNORECASE),
    re.compile(
        r"\b(ls|pwd|cd|cat|head|tail|rg|grep|find|sed|awk|chmod|chown|mkdir|rm|cp|mv"
        r"|git|npm|pnpm|yarn|cargo|pytest|vitest|jest|go|python|pip|node|deno"
        r"|docker|kubectl|terraform)\b",
        re.IGNORECASE,
    ),
)

# Checked top to bottom; the first keyword hit decides.
_TOOL_STATUS_KEYWORDS: tuple[tuple[AgentStatus, tuple[str, ...]], ...] = (
    (AgentStatus.WAITING, ("question",)),
    (AgentStatus.EXECUTING, ("bash", "git", "shell")),
    (AgentStatus.RESEARCHING, ("search", "glob", "grep", "list", "symbol", "web", "lsp", "fetch")),
    (AgentStatus.PLANNING, ("todo",)),
    (AgentStatus.IMPLEMENTING, ("read", "write", "edit", "patch", "skill", "mcp")),
)

_MESSAGES: dict[AgentStatus, str] = {
    AgentStatus.WAITING: "Waiting for your input...",
    AgentStatus.TESTING: "Running tests...",
    AgentStatus.EXECUTING: "Executing command...",
    AgentStatus.RESEARCHING: "Searching documentation...",
    AgentStatus.PLANNING: "Planning tasks...",
    AgentStatus.IMPLEMENTING: "Writing code...",
    AgentStatus.RESPONDING: "Generating response...",
}

_MODE_DEFAULTS: dict[str, tuple[AgentStatus, str]] = {
    "plan": (AgentStatus.PLANNING, "Analyzing problem..."),
    "research": (AgentStatus.RESEARCHING, _MESSAGES[AgentStatus.RESEARCHING]),
    "build": (AgentStatus.IMPLEMENTING, _MESSAGES[AgentStatus.IMPLEMENTING]),
}


def tool_status(name: str | None) -> AgentStatus | None:
    """Coarse status for a pending tool name, or None when nothing matches."""
    tool = coerce_text(name).lower()
    if not tool:
        return None
    for status, keywords in _TOOL_STATUS_KEYWORDS:
        if any(k in tool for k in keywords):
            return status
    return None


def _mode_detail(active_mode: str) -> str:
    mode = coerce_text(active_mode).strip()
    return f"Mode: {mode[:1].upper()}{mode[1:]}" if mode else ""


def infer_status(
    active_mode: str,
    is_loading: bool,
    recent_user_text: str = "",
    recent_assistant_text: str = "",
    pending_tool_names: Sequence[str] = (),
    has_conversation: bool = False,
    awaiting_input: bool = False,
) -> StatusInfo:
    """Derive the status record from already-collected signals."""
    detail = _mode_detail(active_mode)
    mode = coerce_text(active_mode).strip().lower()

    if not is_loading:
        message = "Task completed" if has_conversation else "Ready when you are"
        return StatusInfo(AgentStatus.DONE, message, detail)

    tool_statuses = {tool_status(name) for name in pending_tool_names or ()}
    tool_statuses.discard(None)

    def _info(status: AgentStatus) -> StatusInfo:
        return StatusInfo(status, _MESSAGES[status], detail)

    if awaiting_input or AgentStatus.WAITING in tool_statuses:
        return StatusInfo(
            AgentStatus.WAITING,
            _MESSAGES[AgentStatus.WAITING],
            "Answer the prompt to continue",
        )

    user_text = coerce_text(recent_user_text)
    recent_text = f"{user_text} {coerce_text(recent_assistant_text)}".strip()
    if mode == "build" and TEST_COMMAND.search(recent_text):
        return _info(AgentStatus.TESTING)

    if any(p.search(user_text) for p in COMMAND_INTENT) or AgentStatus.EXECUTING in tool_statuses:
        return _info(AgentStatus.EXECUTING)

    for status in (AgentStatus.RESEARCHING, AgentStatus.PLANNING, AgentStatus.IMPLEMENTING):
        if status in tool_statuses:
            return _info(status)

    status, message = _MODE_DEFAULTS.get(
        mode, (AgentStatus.RESPONDING, _MESSAGES[AgentStatus.RESPONDING]),
    )
    return StatusInfo(status, message, detail)


def pending_tool_names(
    messages: Iterable[Message], recent_assistant_text: str = "",
) -> list[str]:
    """Names of structured calls with no result yet, plus legacy log names.

    Legacy names come from ``> Executing tool:`` headers in the recent
    assistant text, since inline logs carry no result correlation.
    """
    messages = list(messages or [])
    answered = {
        coerce_text(m.tool_call_id) for m in messages
        if MessageRole.parse(m.role) is MessageRole.TOOL and m.tool_call_id
    }
    names: list[str] = []
    for msg in messages:
        if MessageRole.parse(msg.role) is not MessageRole.ASSISTANT:
            continue
        calls = msg.tool_calls if isinstance(msg.tool_calls, (list, tuple)) else []
        for call in calls:
            if not isinstance(call, ToolCall):
                continue
            if coerce_text(call.id) not in answered:
                names.append(coerce_text(call.name))
    names.extend(legacy_tool_names(recent_assistant_text))
    return names


def status_from_messages(
    messages: Iterable[Message],
    active_mode: str,
    is_loading: bool,
    awaiting_input: bool = False,
    config: ActivityConfig | None = None,
) -> StatusInfo:
    """Collect the inference signals from a transcript and infer a status."""
    config = config or ActivityConfig()
    messages = list(messages or [])
    window = max(config.recent_message_window, 1)

    def _recent(role: MessageRole) -> str:
        texts = [
            coerce_text(m.content) for m in messages
            if MessageRole.parse(m.role) is role
        ]
        return " ".join(texts[-window:])

    recent_assistant = _recent(MessageRole.ASSISTANT)
    has_conversation = any(
        MessageRole.parse(m.role) in (MessageRole.USER, MessageRole.ASSISTANT)
        for m in messages
    )
    return infer_status(
        active_mode=active_mode,
        is_loading=is_loading,
        recent_user_text=_recent(MessageRole.USER),
        recent_assistant_text=recent_assistant,
        pending_tool_names=pending_tool_names(messages, recent_assistant),
        has_conversation=has_conversation,
        awaiting_input=awaiting_input,
    )
