"""Tests for the Textual status bar and activity stream widgets."""

from __future__ import annotations

import asyncio

from textual.app import App, ComposeResult

from agentline.engine.status import AgentStatus, StatusInfo
from agentline.shared.models.message import Message, MessageRole, ToolCall
from agentline.tui.widgets.activity_stream import ActivityStream
from agentline.tui.widgets.status_bar import StatusBar


class _TimelineApp(App):
    def compose(self) -> ComposeResult:
        yield StatusBar(id="status")
        yield ActivityStream(id="stream")


FIRST = [
    Message(role=MessageRole.USER, content="list files"),
    Message(
        role=MessageRole.ASSISTANT,
        tool_calls=[ToolCall(id="c1", name="bash", arguments='{"command": "ls"}')],
    ),
]


def _child_ids(stream: ActivityStream) -> list[str]:
    return [child.id for child in stream.children]


def test_activity_stream_mounts_items_in_order():
    async def _run() -> None:
        app = _TimelineApp()
        async with app.run_test(size=(100, 30)) as pilot:
            stream = app.query_one("#stream", ActivityStream)
            stream.update_transcript(FIRST, is_loading=True)
            await pilot.pause()

            assert _child_ids(stream) == ["w-activity-0-user", "w-activity-1-tool-0"]
            assert stream.children[0].has_class("activity-turn-start")
            assert not stream.children[1].has_class("activity-turn-start")

    asyncio.run(_run())


def test_activity_stream_reuses_widgets_between_updates():
    async def _run() -> None:
        app = _TimelineApp()
        async with app.run_test(size=(100, 30)) as pilot:
            stream = app.query_one("#stream", ActivityStream)
            stream.update_transcript(FIRST, is_loading=True)
            await pilot.pause()
            user_widget = stream.children[0]

            stream.update_transcript(
                FIRST + [
                    Message(role=MessageRole.TOOL, content="a.txt", tool_call_id="c1"),
                    Message(role=MessageRole.USER, content="thanks"),
                ],
                is_loading=False,
            )
            await pilot.pause()

            assert _child_ids(stream) == [
                "w-activity-0-user", "w-activity-1-tool-0", "w-activity-3-user",
            ]
            assert stream.children[0] is user_widget
            assert stream.children[2].has_class("activity-turn-start")
            assert len(stream.turns) == 2

    asyncio.run(_run())


def test_activity_stream_drops_stale_items():
    async def _run() -> None:
        app = _TimelineApp()
        async with app.run_test(size=(100, 30)) as pilot:
            stream = app.query_one("#stream", ActivityStream)
            stream.update_transcript(FIRST + [Message(role=MessageRole.ASSISTANT)], is_loading=True)
            await pilot.pause()
            assert "w-activity-2-loading" in _child_ids(stream)

            stream.update_transcript(FIRST, is_loading=False)
            await pilot.pause()
            assert _child_ids(stream) == ["w-activity-0-user", "w-activity-1-tool-0"]

            stream.toggle_expanded("activity-1-tool-0")
            await pilot.pause()
            assert _child_ids(stream) == ["w-activity-0-user", "w-activity-1-tool-0"]

    asyncio.run(_run())


def test_status_bar_shows_latest_status():
    async def _run() -> None:
        app = _TimelineApp()
        async with app.run_test(size=(100, 30)) as pilot:
            bar = app.query_one("#status", StatusBar)
            bar.show(StatusInfo(AgentStatus.TESTING, "Running tests...", "Mode: Build"))
            await pilot.pause()

            assert bar.status == "testing"
            text = bar.render().plain
            assert "Testing" in text
            assert "Running tests..." in text
            assert "Mode: Build" in text

    asyncio.run(_run())
