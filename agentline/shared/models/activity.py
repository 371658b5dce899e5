"""Activity timeline models — the output of transcript reconstruction.

Everything here is a derived view: the turn builder creates fresh instances on
every recomputation, and consumers treat them as read-only. ``to_dict`` gives a
plain JSON-compatible structure for presentation layers that do not want to
import these classes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActivityKind(Enum):
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"
    PLAN = "plan"
    LOADING = "loading"


class ActionCategory(Enum):
    READ = "read"
    WRITE = "write"
    EDIT = "edit"
    SEARCH = "search"
    EXECUTE = "execute"
    GENERIC = "generic"


class ActionStatus(Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (ActionStatus.SUCCESS, ActionStatus.ERROR)


class PlanStepStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"


@dataclass
class PlanStep:
    text: str
    status: PlanStepStatus = PlanStepStatus.PENDING

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "status": self.status.value}


@dataclass
class ResponseSection:
    """A titled slice of assistant prose (``Summary:``, ``## Changes``...)."""

    title: str
    body: str

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "body": self.body}


@dataclass
class ActivityItem:
    """One renderable unit of the timeline.

    Which fields are meaningful depends on ``kind``:
        user      → content, attachments
        assistant → content, sections (role is "system" for rendered system text)
        tool      → action_* fields, tool_call_id (None for orphan results)
        plan      → steps
        loading   → content (placeholder text)
    """

    id: str
    kind: ActivityKind
    message_index: int
    content: str = ""
    role: str | None = None
    action_category: ActionCategory | None = None
    action_title: str = ""
    action_description: str = ""
    action_content: str = ""
    action_status: ActionStatus | None = None
    tool_call_id: str | None = None
    steps: list[PlanStep] = field(default_factory=list)
    sections: list[ResponseSection] = field(default_factory=list)
    attachments: list[str] = field(default_factory=list)

    def resolve(self, content: str, status: ActionStatus) -> None:
        """Apply a tool result in place.

        Resolution only moves forward: a terminal status may be overwritten by
        a later result for the same call, but never reverts to pending/running.
        """
        if not status.is_terminal:
            return
        self.action_content = content
        self.action_status = status

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "kind": self.kind.value,
            "message_index": self.message_index,
            "content": self.content,
        }
        if self.role is not None:
            data["role"] = self.role
        if self.kind is ActivityKind.TOOL:
            data.update({
                "action_category": self.action_category.value if self.action_category else None,
                "action_title": self.action_title,
                "action_description": self.action_description,
                "action_content": self.action_content,
                "action_status": self.action_status.value if self.action_status else None,
                "tool_call_id": self.tool_call_id,
            })
        if self.steps:
            data["steps"] = [s.to_dict() for s in self.steps]
        if self.sections:
            data["sections"] = [s.to_dict() for s in self.sections]
        if self.attachments:
            data["attachments"] = list(self.attachments)
        return data


@dataclass
class Turn:
    """A user message and everything the agent did in response."""

    id: str
    items: list[ActivityItem] = field(default_factory=list)

    @property
    def tool_items(self) -> list[ActivityItem]:
        return [i for i in self.items if i.kind is ActivityKind.TOOL]

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "items": [i.to_dict() for i in self.items]}
