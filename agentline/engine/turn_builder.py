"""Turn builder — reconstruct a turn-grouped activity timeline from a transcript.

The whole timeline is rebuilt on every call: the builder keeps no state between
calls and never mutates the messages it reads, so it can run on every streamed
token and for several transcripts at once.

Per message, in transcript order:
    system    → skipped (or rendered as plain text when configured)
    user      → closes the current turn, opens a new one with a user item
    assistant → legacy tool logs stripped, plan item, prose item, then one
                tool item per tool invocation
    tool      → resolves the matching tool item in place, or appends an
                orphan "Tool result" item when no call carries its id

Tool items move pending/running → success/error. Results are indexed by call
id up front, so a result that arrives in the transcript before its call is
still applied to that call rather than treated as an orphan.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Union

from agentline.shared.formatters.tool_call import summarize_tool_call, truncate
from agentline.shared.models.activity import (
    ActionCategory,
    ActionStatus,
    ActivityItem,
    ActivityKind,
    Turn,
)
from agentline.shared.models.message import Message, MessageRole, ToolCall
from agentline.shared.normalize import coerce_text
from agentline.shared.patterns import (
    LegacyToolMention,
    find_legacy_tool_logs,
    is_error_result,
    strip_legacy_tool_logs,
)
from agentline.shared.plan import extract_plan
from agentline.shared.sections import split_response_sections

from .config import ActivityConfig

logger = logging.getLogger(__name__)

ORPHAN_TITLE = "Tool result"

# A tool invocation is either a structured call or an inline legacy log block.
ToolInvocation = Union[ToolCall, LegacyToolMention]


def result_status(text: str | None) -> ActionStatus:
    return ActionStatus.ERROR if is_error_result(text) else ActionStatus.SUCCESS


@dataclass
class _ToolResult:
    content: str
    status: ActionStatus


class TurnBuilder:
    """Single-pass state machine over one transcript snapshot."""

    def __init__(
        self,
        messages: Iterable[Message],
        is_loading: bool = False,
        config: ActivityConfig | None = None,
    ) -> None:
        self._messages = list(messages or [])
        self._is_loading = bool(is_loading)
        self._config = config or ActivityConfig()
        self._turns: list[Turn] = []
        self._current: Turn | None = None
        # call id → the tool item emitted for it
        self._tool_items: dict[str, ActivityItem] = {}
        self._loading_emitted = False
        self._orphans = 0

        self._call_ids: set[str] = set()
        self._results: dict[str, _ToolResult] = {}
        self._index_transcript()

    # ── Precomputation ──

    def _index_transcript(self) -> None:
        """Collect every call id and the last result seen for each id."""
        for msg in self._messages:
            role = _role(msg)
            if role is MessageRole.ASSISTANT:
                for call in _tool_calls(msg):
                    call_id = coerce_text(call.id)
                    if call_id:
                        self._call_ids.add(call_id)
            elif role is MessageRole.TOOL:
                call_id = coerce_text(msg.tool_call_id)
                if call_id:
                    self._results[call_id] = self._make_result(msg.content)

    def _make_result(self, content: object) -> _ToolResult:
        text = coerce_text(content)
        return _ToolResult(
            content=truncate(text, self._config.tool_result_max_chars),
            status=result_status(text),
        )

    # ── Turn bookkeeping ──

    def _open_turn(self, index: int) -> Turn:
        turn = Turn(id=f"turn-{index}")
        self._turns.append(turn)
        self._current = turn
        return turn

    def _turn_for(self, index: int) -> Turn:
        # Assistant/tool output before any user message gets an implicit turn.
        if self._current is None:
            return self._open_turn(index)
        return self._current

    # ── Public ──

    def build(self) -> list[Turn]:
        for index, msg in enumerate(self._messages):
            role = _role(msg)
            if role is MessageRole.USER:
                self._on_user(index, msg)
            elif role is MessageRole.ASSISTANT:
                self._on_assistant(index, msg)
            elif role is MessageRole.TOOL:
                self._on_tool(index, msg)
            elif role is MessageRole.SYSTEM and self._config.include_system_messages:
                self._on_system(index, msg)

        turns = [t for t in self._turns if t.items]
        logger.debug(
            "build_turns: %d messages -> %d turns (%d dropped empty, %d orphan results)",
            len(self._messages), len(turns), len(self._turns) - len(turns), self._orphans,
        )
        return turns

    # ── Handlers ──

    def _on_user(self, index: int, msg: Message) -> None:
        turn = self._open_turn(index)
        turn.items.append(ActivityItem(
            id=f"activity-{index}-user",
            kind=ActivityKind.USER,
            message_index=index,
            content=coerce_text(msg.content),
            role="user",
            attachments=_attachment_names(msg),
        ))

    def _on_system(self, index: int, msg: Message) -> None:
        text = coerce_text(msg.content).strip()
        if not text:
            return
        self._turn_for(index).items.append(ActivityItem(
            id=f"activity-{index}-msg",
            kind=ActivityKind.ASSISTANT,
            message_index=index,
            content=text,
            role="system",
        ))

    def _on_assistant(self, index: int, msg: Message) -> None:
        content = coerce_text(msg.content)
        structured = _tool_calls(msg)
        invocations: list[ToolInvocation] = list(structured)
        if not structured:
            # Inline logs only stand in for tool items when no structured
            # calls exist for this message.
            invocations = list(find_legacy_tool_logs(content))

        items: list[ActivityItem] = []
        plan = extract_plan(strip_legacy_tool_logs(content))
        if plan.steps:
            items.append(ActivityItem(
                id=f"activity-{index}-plan",
                kind=ActivityKind.PLAN,
                message_index=index,
                steps=plan.steps,
            ))
        if plan.remaining_text:
            items.append(ActivityItem(
                id=f"activity-{index}-msg",
                kind=ActivityKind.ASSISTANT,
                message_index=index,
                content=plan.remaining_text,
                role="assistant",
                sections=split_response_sections(plan.remaining_text),
            ))

        for position, invocation in enumerate(invocations):
            items.append(self._tool_item(index, position, invocation))

        if not items and self._should_show_loading(index):
            self._loading_emitted = True
            items.append(ActivityItem(
                id=f"activity-{index}-loading",
                kind=ActivityKind.LOADING,
                message_index=index,
                content=self._config.loading_text,
            ))

        if items:
            self._turn_for(index).items.extend(items)

    def _should_show_loading(self, index: int) -> bool:
        return (
            self._is_loading
            and not self._loading_emitted
            and index == len(self._messages) - 1
        )

    def _tool_item(
        self, index: int, position: int, invocation: ToolInvocation,
    ) -> ActivityItem:
        if isinstance(invocation, LegacyToolMention):
            summary = summarize_tool_call(
                invocation.name, "", self._config.generic_description_max_chars,
            )
            result = self._make_result(invocation.result)
            return ActivityItem(
                id=f"activity-{index}-legacy-{position}",
                kind=ActivityKind.TOOL,
                message_index=index,
                action_category=summary.category,
                action_title=invocation.name,
                action_description=f"Executing {invocation.name}",
                action_content=result.content,
                action_status=result.status,
            )

        call_id = coerce_text(invocation.id)
        summary = summarize_tool_call(
            invocation.name,
            invocation.arguments,
            self._config.generic_description_max_chars,
        )
        item = ActivityItem(
            id=f"activity-{index}-tool-{position}",
            kind=ActivityKind.TOOL,
            message_index=index,
            action_category=summary.category,
            action_title=summary.title,
            action_description=summary.description,
            action_status=(
                ActionStatus.RUNNING if self._is_loading else ActionStatus.PENDING
            ),
            tool_call_id=call_id or None,
        )
        if call_id:
            result = self._results.get(call_id)
            if result is not None:
                item.resolve(result.content, result.status)
            self._tool_items[call_id] = item
        return item

    def _on_tool(self, index: int, msg: Message) -> None:
        call_id = coerce_text(msg.tool_call_id) or None
        result = self._make_result(msg.content)

        if call_id is not None:
            item = self._tool_items.get(call_id)
            if item is not None:
                item.resolve(result.content, result.status)
                return
            if call_id in self._call_ids:
                # The call shows up later in the transcript and picks the
                # result up from the precomputed index.
                return

        self._orphans += 1
        self._turn_for(index).items.append(ActivityItem(
            id=f"activity-{index}-result",
            kind=ActivityKind.TOOL,
            message_index=index,
            action_category=ActionCategory.GENERIC,
            action_title=ORPHAN_TITLE,
            action_description=f"Result for call {call_id}" if call_id else "",
            action_content=result.content,
            action_status=result.status,
        ))


def _role(msg: Message) -> MessageRole | None:
    return MessageRole.parse(getattr(msg, "role", None))


def _attachment_names(msg: Message) -> list[str]:
    attachments = getattr(msg, "attachments", None)
    if not isinstance(attachments, (list, tuple)):
        return []
    return [coerce_text(getattr(a, "name", a)) for a in attachments]


def _tool_calls(msg: Message) -> list[ToolCall]:
    calls = getattr(msg, "tool_calls", None)
    if not isinstance(calls, (list, tuple)):
        return []
    return [c for c in calls if isinstance(c, ToolCall)]


def build_turns(
    messages: Iterable[Message],
    is_loading: bool = False,
    config: ActivityConfig | None = None,
) -> list[Turn]:
    """Reconstruct the turn-grouped activity timeline for a transcript."""
    return TurnBuilder(messages, is_loading, config).build()
