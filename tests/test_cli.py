"""Tests for the agentline command line entry point."""

import json

from agentline.engine.cli import main


def _write_transcript(tmp_path, messages):
    path = tmp_path / "transcript.json"
    path.write_text(json.dumps(messages))
    return str(path)


TRANSCRIPT = [
    {"role": "user", "content": "list files"},
    {
        "role": "assistant",
        "content": "",
        "tool_calls": [{"id": "c1", "name": "bash", "arguments": "{\"command\": \"ls\"}"}],
    },
    {"role": "tool", "tool_call_id": "c1", "content": "a.txt"},
]


class TestCli:
    def test_json_output(self, tmp_path, capsys):
        path = _write_transcript(tmp_path, TRANSCRIPT)
        assert main([path, "--json"]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["status"]["status"] == "done"
        assert payload["status"]["message"] == "Task completed"
        items = payload["turns"][0]["items"]
        assert [i["id"] for i in items] == ["activity-0-user", "activity-1-tool-0"]
        assert items[1]["action_status"] == "success"

    def test_json_while_loading(self, tmp_path, capsys):
        path = _write_transcript(tmp_path, TRANSCRIPT[:2])
        assert main([path, "--json", "--loading"]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["status"]["status"] == "executing"
        assert payload["turns"][0]["items"][1]["action_status"] == "running"

    def test_rendered_output(self, tmp_path, capsys):
        path = _write_transcript(tmp_path, TRANSCRIPT)
        assert main([path]) == 0
        out = capsys.readouterr().out
        assert "Task completed" in out
        assert "You" in out

    def test_empty_transcript(self, tmp_path, capsys):
        path = _write_transcript(tmp_path, [])
        assert main([path]) == 0
        assert "No activity yet." in capsys.readouterr().out

    def test_missing_transcript(self, tmp_path):
        assert main([str(tmp_path / "missing.json")]) == 1

    def test_bad_config(self, tmp_path):
        path = _write_transcript(tmp_path, TRANSCRIPT)
        assert main([path, "--config", str(tmp_path / "missing.yaml")]) == 1
