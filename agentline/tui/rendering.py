"""Rich markup rendering for activity turns and the status line.

Pure string builders: the Textual widgets and the CLI both feed these into
Rich, and tests can assert on the markup directly.
"""

from __future__ import annotations

from agentline.engine.status import AgentStatus, StatusInfo
from agentline.shared.models.activity import (
    ActionCategory,
    ActionStatus,
    ActivityItem,
    ActivityKind,
    PlanStepStatus,
    Turn,
)

CATEGORY_ICONS: dict[ActionCategory, str] = {
    ActionCategory.READ: "\U0001f4c4",
    ActionCategory.WRITE: "\U0001f4dd",
    ActionCategory.EDIT: "✏",
    ActionCategory.SEARCH: "\U0001f50e",
    ActionCategory.EXECUTE: "$",
    ActionCategory.GENERIC: "\U0001f527",
}

STATUS_LABELS: dict[ActionStatus, str] = {
    ActionStatus.PENDING: "[dim]Queued[/dim]",
    ActionStatus.RUNNING: "[blue]Running[/blue]",
    ActionStatus.SUCCESS: "[green]Done[/green]",
    ActionStatus.ERROR: "[red]Error[/red]",
}

AGENT_STATUS_COLORS: dict[AgentStatus, str] = {
    AgentStatus.PLANNING: "blue",
    AgentStatus.RESEARCHING: "yellow",
    AgentStatus.IMPLEMENTING: "green",
    AgentStatus.EXECUTING: "cyan",
    AgentStatus.TESTING: "magenta",
    AgentStatus.WAITING: "dark_orange",
    AgentStatus.RESPONDING: "sky_blue1",
    AgentStatus.DONE: "green",
}

MAX_RESULT_LINES = 20


def _esc(text: str) -> str:
    """Escape Rich markup characters."""
    return text.replace("[", "\\[")


def render_tool_rich(item: ActivityItem, expanded: bool = False) -> str:
    """Collapsed one-liner for a tool item, with the result when expanded."""
    status = item.action_status or ActionStatus.PENDING
    icon = CATEGORY_ICONS.get(item.action_category or ActionCategory.GENERIC, "")

    parts = ["[dim]▼[/dim]" if expanded else "[dim]▶[/dim]"]
    if icon:
        parts.append(icon)
    parts.append(f"[cyan]{_esc(item.action_title)}[/cyan]")
    if item.action_description:
        parts.append(f"[dim]{_esc(item.action_description)}[/dim]")
    parts.append(STATUS_LABELS[status])
    lines = ["  ".join(parts)]

    if expanded and item.action_content:
        content_lines = item.action_content.splitlines()
        color = "red" if status is ActionStatus.ERROR else "dim"
        for line in content_lines[:MAX_RESULT_LINES]:
            lines.append(f"  [{color}]│[/{color}] {_esc(line)}")
        remaining = len(content_lines) - MAX_RESULT_LINES
        if remaining > 0:
            lines.append(f"  [dim]... {remaining} more lines[/dim]")
    return "\n".join(lines)


def render_item_rich(item: ActivityItem, expanded: bool = False) -> str:
    if item.kind is ActivityKind.USER:
        header = "[bold green]You[/bold green]"
        if item.attachments:
            header += f" [dim]({len(item.attachments)} attachment(s))[/dim]"
        return f"{header}\n{_esc(item.content)}" if item.content else header

    if item.kind is ActivityKind.ASSISTANT:
        label = "System" if item.role == "system" else "Agent"
        lines = [f"[bold cyan]{label}[/bold cyan]"]
        if len(item.sections) > 1:
            for section in item.sections:
                lines.append(f"  [bold dim]{_esc(section.title)}[/bold dim]")
                lines.extend(f"  {_esc(line)}" for line in section.body.splitlines())
        else:
            lines.append(_esc(item.content))
        return "\n".join(lines)

    if item.kind is ActivityKind.PLAN:
        lines = ["[bold]Plan[/bold]"]
        for step in item.steps:
            done = step.status is PlanStepStatus.COMPLETED
            marker = "[green]✓[/green]" if done else "[dim]○[/dim]"
            lines.append(f"  {marker} {_esc(step.text)}")
        return "\n".join(lines)

    if item.kind is ActivityKind.TOOL:
        return render_tool_rich(item, expanded)

    return f"[italic yellow]{_esc(item.content)}[/italic yellow]"


def render_turns_rich(turns: list[Turn], expanded: bool = False) -> str:
    """Render every turn top to bottom, separated by a rule line."""
    blocks: list[str] = []
    for turn in turns:
        blocks.append("\n".join(render_item_rich(i, expanded) for i in turn.items))
    return "\n[dim]────────────────────────────[/dim]\n".join(blocks)


def render_status_rich(info: StatusInfo) -> str:
    color = AGENT_STATUS_COLORS.get(info.status, "white")
    text = f"[{color}]● {info.status.value.capitalize()}[/{color}]  {_esc(info.message)}"
    if info.detail:
        text += f"  [dim]{_esc(info.detail)}[/dim]"
    return text
