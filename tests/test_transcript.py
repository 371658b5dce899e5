"""Tests for agentline.shared.transcript — JSON transcripts into messages."""

import json

import pytest

from agentline.engine.errors import TranscriptLoadError
from agentline.shared.models.message import MessageRole, ToolCall
from agentline.shared.transcript import (
    coerce_text,
    load_transcript,
    message_from_dict,
    messages_from_dicts,
)


class TestMessageFromDict:
    def test_role_case_insensitive(self):
        msg = message_from_dict({"role": "User", "content": "hi"})
        assert msg.role is MessageRole.USER
        assert msg.content == "hi"

    def test_unknown_role_skipped(self):
        assert message_from_dict({"role": "narrator", "content": "x"}) is None

    def test_flat_tool_call(self):
        msg = message_from_dict({
            "role": "assistant",
            "tool_calls": [{"id": "c1", "name": "bash", "arguments": '{"command": "ls"}'}],
        })
        assert msg.tool_calls == [ToolCall(id="c1", name="bash", arguments='{"command": "ls"}')]

    def test_function_style_tool_call(self):
        msg = message_from_dict({
            "role": "assistant",
            "tool_calls": [{"id": "c1", "function": {"name": "read", "arguments": {"path": "a"}}}],
        })
        call = msg.tool_calls[0]
        assert call.name == "read"
        assert json.loads(call.arguments) == {"path": "a"}

    def test_tool_result(self):
        msg = message_from_dict({"role": "tool", "tool_call_id": "c1", "content": "ok"})
        assert msg.role is MessageRole.TOOL
        assert msg.tool_call_id == "c1"

    def test_attachments(self):
        msg = message_from_dict({
            "role": "user",
            "attachments": ["notes.txt", {"name": "shot.png", "mime_type": "image/png"}],
        })
        assert [a.name for a in msg.attachments] == ["notes.txt", "shot.png"]
        assert msg.attachments[1].mime_type == "image/png"


class TestMessagesFromDicts:
    def test_list(self):
        messages = messages_from_dicts([{"role": "user", "content": "a"}, "junk"])
        assert len(messages) == 1

    def test_wrapped_object(self):
        messages = messages_from_dicts({"messages": [{"role": "assistant", "content": "b"}]})
        assert messages[0].role is MessageRole.ASSISTANT

    def test_wrong_shape(self):
        with pytest.raises(TranscriptLoadError):
            messages_from_dicts({"foo": 1})


class TestLoadTranscript:
    def test_load(self, tmp_path):
        path = tmp_path / "t.json"
        path.write_text(json.dumps([{"role": "user", "content": "hi"}]))
        messages = load_transcript(path)
        assert [m.content for m in messages] == ["hi"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(TranscriptLoadError) as exc_info:
            load_transcript(tmp_path / "missing.json")
        assert exc_info.value.source.endswith("missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "t.json"
        path.write_text("{not json")
        with pytest.raises(TranscriptLoadError, match="invalid JSON"):
            load_transcript(path)


def test_coerce_text():
    assert coerce_text(None) == ""
    assert coerce_text("x") == "x"
    assert coerce_text({"b": 1, "a": 2}) == '{"a": 2, "b": 1}'
