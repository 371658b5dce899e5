"""Status bar — single line showing what the agent is doing right now."""

from __future__ import annotations

from rich.text import Text
from textual.reactive import reactive
from textual.widget import Widget

from agentline.engine.status import AgentStatus, StatusInfo
from agentline.tui.rendering import AGENT_STATUS_COLORS


class StatusBar(Widget):
    """Renders the latest StatusInfo from status inference."""

    DEFAULT_CSS = """
    StatusBar {
        height: 1;
        dock: top;
    }
    """

    status: reactive[str] = reactive(AgentStatus.DONE.value)
    message: reactive[str] = reactive("Ready when you are")
    detail: reactive[str] = reactive("")

    def show(self, info: StatusInfo) -> None:
        self.status = info.status.value
        self.message = info.message
        self.detail = info.detail

    def render(self) -> Text:
        try:
            color = AGENT_STATUS_COLORS[AgentStatus(self.status)]
        except ValueError:
            color = "white"

        bar = Text()
        bar.append(f" ● {self.status.capitalize()} ", style=f"bold {color}")
        bar.append(" │ ", style="dim")
        bar.append(self.message)
        if self.detail:
            bar.append(" │ ", style="dim")
            bar.append(self.detail, style="dim")
        return bar
