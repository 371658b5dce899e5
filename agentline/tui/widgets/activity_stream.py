"""Activity stream — scrollable timeline rebuilt from the transcript."""

from __future__ import annotations

from textual.containers import VerticalScroll
from textual.widgets import Static

from agentline.engine.config import ActivityConfig
from agentline.engine.turn_builder import build_turns
from agentline.shared.models.activity import Turn
from agentline.shared.models.message import Message
from agentline.tui.rendering import render_item_rich


class ActivityStream(VerticalScroll):
    """Shows turns as stacked Static items.

    Every transcript change recomputes the whole turn list. Items are keyed by
    their deterministic ids, so unchanged items keep their widgets and only
    their content is refreshed.
    """

    DEFAULT_CSS = """
    ActivityStream > .activity-item {
        height: auto;
        margin: 0 0 1 0;
    }
    ActivityStream > .activity-turn-start {
        border-top: solid $accent-darken-2;
    }
    """

    def __init__(self, config: ActivityConfig | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self._config = config or ActivityConfig()
        self._turns: list[Turn] = []
        self._expanded: set[str] = set()

    @property
    def turns(self) -> list[Turn]:
        return self._turns

    def update_transcript(self, messages: list[Message], is_loading: bool) -> None:
        self._turns = build_turns(messages, is_loading, self._config)
        self._sync()

    def toggle_expanded(self, item_id: str) -> None:
        if item_id in self._expanded:
            self._expanded.discard(item_id)
        else:
            self._expanded.add(item_id)
        self._sync()

    def _sync(self) -> None:
        wanted: list[tuple[str, str, bool]] = []
        for turn in self._turns:
            for position, item in enumerate(turn.items):
                wanted.append((
                    item.id,
                    render_item_rich(item, item.id in self._expanded),
                    position == 0,
                ))

        existing = {child.id: child for child in self.children if child.id}
        wanted_ids = {f"w-{item_id}" for item_id, _, _ in wanted}
        for widget_id, child in existing.items():
            if widget_id not in wanted_ids:
                child.remove()

        previous: Static | None = None
        for item_id, markup, turn_start in wanted:
            widget_id = f"w-{item_id}"
            child = existing.get(widget_id)
            if isinstance(child, Static):
                child.update(markup)
            else:
                child = Static(markup, id=widget_id, classes="activity-item", markup=True)
                if previous is not None:
                    self.mount(child, after=previous)
                elif self.children:
                    self.mount(child, before=0)
                else:
                    self.mount(child)
            child.set_class(turn_start, "activity-turn-start")
            previous = child
        self.scroll_end(animate=False)
