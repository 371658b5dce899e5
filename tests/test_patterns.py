"""Tests for agentline.shared.patterns — the shared text matchers."""

from agentline.shared.patterns import (
    find_legacy_tool_logs,
    find_mentions,
    is_error_result,
    legacy_tool_names,
    match_plan_line,
    strip_legacy_tool_logs,
)


LEGACY = "> Executing tool: `bash`\n> Result:\n```\nok\n```\nAll good."


class TestLegacyToolLogs:
    def test_strip_leaves_only_prose(self):
        assert strip_legacy_tool_logs(LEGACY) == "All good."

    def test_captures_name_and_result(self):
        logs = find_legacy_tool_logs(LEGACY)
        assert len(logs) == 1
        assert logs[0].name == "bash"
        assert logs[0].result == "ok\n"

    def test_result_line_is_optional(self):
        text = "> Executing tool: `read_file`\n```\nfile body\n```"
        logs = find_legacy_tool_logs(text)
        assert [log.name for log in logs] == ["read_file"]
        assert logs[0].result == "file body\n"
        assert strip_legacy_tool_logs(text) == ""

    def test_repeated_blocks(self):
        text = (
            "Start\n"
            "> Executing tool: `glob`\n```\na.py\n```\n"
            "middle\n"
            "> Executing tool: `bash`\n> Result:\n```\ndone\n```\n"
            "end"
        )
        logs = find_legacy_tool_logs(text)
        assert [log.name for log in logs] == ["glob", "bash"]
        assert logs[0].end <= logs[1].start
        assert strip_legacy_tool_logs(text) == "Start\n\nmiddle\n\nend"

    def test_repeated_calls_are_independent(self):
        # No cursor state leaks between calls.
        assert len(find_legacy_tool_logs(LEGACY)) == 1
        assert len(find_legacy_tool_logs(LEGACY)) == 1

    def test_empty_input(self):
        assert find_legacy_tool_logs(None) == []
        assert strip_legacy_tool_logs("") == ""

    def test_header_names_without_result_block(self):
        text = "> Executing tool: `todowrite`\nstill streaming"
        assert legacy_tool_names(text) == ["todowrite"]
        assert find_legacy_tool_logs(text) == []


class TestPlanLines:
    def test_numbered_dot_and_paren(self):
        assert match_plan_line("1. first").text == "first"
        assert match_plan_line("2) second").kind == "numbered"

    def test_checkbox_marks(self):
        done = match_plan_line("- [x] done thing")
        todo = match_plan_line("- [ ] todo thing")
        upper = match_plan_line("- [X] shouted")
        assert (done.kind, done.text, done.completed) == ("checkbox", "done thing", True)
        assert (todo.text, todo.completed) == ("todo thing", False)
        assert upper.completed is True

    def test_bullet_needs_open_block(self):
        assert match_plan_line("- just prose") is None
        assert match_plan_line("* also prose") is None
        inside = match_plan_line("- step", in_plan=True)
        assert inside.kind == "bullet"
        assert inside.text == "step"

    def test_prose_is_not_a_plan_line(self):
        assert match_plan_line("Some text", in_plan=True) is None


class TestMentions:
    def test_finds_path_tokens(self):
        assert find_mentions("see @src/a.ts and @docs/README.md") == [
            ("@src/a.ts", 4, 13),
            ("@docs/README.md", 18, 33),
        ]

    def test_no_mentions(self):
        assert find_mentions("plain text") == []
        assert find_mentions(None) == []


class TestErrorSignal:
    def test_error_words(self):
        assert is_error_result("Error: file not found")
        assert is_error_result("permission DENIED")
        assert is_error_result("err: exit 1")

    def test_success_text(self):
        assert not is_error_result("5 passed")
        assert not is_error_result("")
        assert not is_error_result(None)


class TestLegacyToolLogBoundaries:
    HEADER_WITHOUT_BLOCK = (
        "> Executing tool: `a`\nno block here\n"
        "> Executing tool: `b`\n```\nok\n```\nDone."
    )

    def test_header_without_block_does_not_swallow_next_tool(self):
        logs = find_legacy_tool_logs(self.HEADER_WITHOUT_BLOCK)
        assert [(log.name, log.result) for log in logs] == [("b", "ok\n")]

    def test_names_still_cover_both_headers(self):
        assert legacy_tool_names(self.HEADER_WITHOUT_BLOCK) == ["a", "b"]

    def test_non_string_input(self):
        assert find_legacy_tool_logs(["x"]) == []
        assert strip_legacy_tool_logs({"a": 1}) == '{"a": 1}'
        assert is_error_result({"error": "boom"})
