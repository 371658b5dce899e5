"""Tool call summaries for the activity timeline.

Maps a tool name plus its raw argument payload to a display category and a
one-line description. Known tools are table-driven; a few need a custom
description and register one with a decorator:

    @tool_describer("mytool")
    def _describe_my_tool(args):
        return "..."

Summaries never raise: unparsable arguments behave like an empty payload and
unknown tools fall back to a truncated copy of the raw argument text.
"""

from __future__ import annotations

import ast
import json
from dataclasses import dataclass
from typing import Any, Callable
from urllib.parse import urlparse

from agentline.shared.models.activity import ActionCategory
from agentline.shared.normalize import coerce_text

DEFAULT_DESCRIPTION_MAX_CHARS = 160


@dataclass(frozen=True)
class ToolSummary:
    category: ActionCategory
    title: str
    description: str


# ── Argument Parsing ──


def parse_args(arguments: Any) -> dict:
    """Parse a tool arguments payload to a dict, falling back gracefully.

    Providers usually serialise arguments with ``json.dumps``, so
    ``json.loads`` succeeds for the common case. Falls back to
    ``ast.literal_eval`` for Python repr format, then to ``{"_raw": arguments}``.
    """
    if isinstance(arguments, dict):
        return arguments
    if not arguments or not isinstance(arguments, str):
        return {}
    try:
        parsed = json.loads(arguments)
        if isinstance(parsed, dict):
            return parsed
        return {"_raw": arguments}
    except (json.JSONDecodeError, TypeError, ValueError):
        pass
    try:
        parsed = ast.literal_eval(arguments)
        if isinstance(parsed, dict):
            return parsed
        return {"_raw": arguments}
    except (ValueError, SyntaxError, TypeError, MemoryError, RecursionError):
        pass
    return {"_raw": arguments}


# ── Tool table ──

# canonical name → (category, argument keys tried in order for the description)
_KNOWN_TOOLS: dict[str, tuple[ActionCategory, tuple[str, ...]]] = {
    "read": (ActionCategory.READ, ("path", "file_path", "filePath")),
    "write": (ActionCategory.WRITE, ("path", "file_path", "filePath")),
    "edit": (ActionCategory.EDIT, ("path", "file_path", "filePath")),
    "patch": (ActionCategory.EDIT, ("path",)),
    "list": (ActionCategory.SEARCH, ("path", "directory")),
    "glob": (ActionCategory.SEARCH, ("pattern", "path")),
    "search": (ActionCategory.SEARCH, ("pattern", "query")),
    "grep": (ActionCategory.SEARCH, ("pattern", "query")),
    "symbols": (ActionCategory.SEARCH, ("path",)),
    "lsp": (ActionCategory.SEARCH, ("path", "request")),
    "webfetch": (ActionCategory.SEARCH, ("url",)),
    "websearch": (ActionCategory.SEARCH, ("query",)),
    "bash": (ActionCategory.EXECUTE, ("command", "cmd")),
    "git": (ActionCategory.EXECUTE, ("command",)),
    "task": (ActionCategory.GENERIC, ("description", "prompt")),
    "todoread": (ActionCategory.GENERIC, ("filter",)),
    "todowrite": (ActionCategory.GENERIC, ("content",)),
    "skill": (ActionCategory.GENERIC, ("skill_name", "name", "skill")),
    "question": (ActionCategory.GENERIC, ("question",)),
}

_TOOL_NAME_ALIASES: dict[str, str] = {
    "read_file": "read",
    "file_read": "read",
    "write_file": "write",
    "file_write": "write",
    "edit_file": "edit",
    "file_edit": "edit",
    "apply_patch": "patch",
    "list_directory": "list",
    "list_dir": "list",
    "list_symbols": "symbols",
    "search_files": "grep",
    "web_fetch": "webfetch",
    "fetch": "webfetch",
    "web_search": "websearch",
    "run_bash": "bash",
    "shell": "bash",
    "run_shell_command": "bash",
    "todo_read": "todoread",
    "todo_write": "todowrite",
    "ask_user": "question",
    "askuserquestion": "question",
}

_DESCRIBERS: dict[str, Callable[[dict], str]] = {}


def tool_describer(name: str):
    """Decorator to register a custom description builder for a tool."""

    def decorator(fn: Callable[[dict], str]):
        _DESCRIBERS[name] = fn
        return fn

    return decorator


def normalize_tool_name(name: str | None) -> str:
    """Lower-case, strip an MCP server prefix and map aliases to table names.

    E.g. ``mcp__files__read_file`` → ``read`` and ``Bash`` → ``bash``.
    """
    name = coerce_text(name).strip().lower()
    if not name:
        return ""
    if name.startswith("mcp__") and name.count("__") >= 2:
        name = name.split("__", 2)[2]
    return _TOOL_NAME_ALIASES.get(name, name)


# ── Helpers ──


def truncate(text: str, length: int) -> str:
    """Truncate text with an ellipsis marker, keeping the result within *length*."""
    if not text:
        return ""
    if len(text) <= length:
        return text
    if length <= 3:
        return text[:length]
    return text[: length - 3] + "..."


def _first_value(args: dict, keys: tuple[str, ...]) -> str:
    for key in keys:
        value = coerce_text(args.get(key)).strip()
        if value:
            return value
    return ""


@tool_describer("webfetch")
def _describe_web_fetch(args: dict) -> str:
    url = coerce_text(args.get("url")).strip()
    if not url:
        return ""
    try:
        return urlparse(url).netloc or url
    except ValueError:
        return url


@tool_describer("todowrite")
def _describe_todo_write(args: dict) -> str:
    todos = args.get("todos")
    if isinstance(todos, list):
        done = sum(
            1 for t in todos
            if isinstance(t, dict) and t.get("status") == "completed"
        )
        return f"{done}/{len(todos)} done" if todos else "empty"
    action = coerce_text(args.get("action")).strip()
    content = coerce_text(args.get("content")).strip()
    return " ".join(part for part in (action, content) if part)


@tool_describer("skill")
def _describe_skill(args: dict) -> str:
    name = _first_value(args, ("skill_name", "name", "skill"))
    action = coerce_text(args.get("action")).strip()
    if action and action != "invoke":
        return f"{action} {name}".strip()
    return name


@tool_describer("git")
def _describe_git(args: dict) -> str:
    command = coerce_text(args.get("command")).strip()
    message = coerce_text(args.get("message")).strip()
    if command == "commit" and message:
        return f'commit "{truncate(message, 40)}"'
    return command


@tool_describer("question")
def _describe_question(args: dict) -> str:
    questions = args.get("questions")
    if isinstance(questions, list) and questions:
        first = questions[0]
        if isinstance(first, dict):
            return coerce_text(first.get("question") or first.get("header")).strip()
    return coerce_text(args.get("question")).strip()


# ── Entry points ──


def tool_category(name: str | None) -> ActionCategory:
    """Display category for a tool name; unknown tools are generic."""
    entry = _KNOWN_TOOLS.get(normalize_tool_name(name))
    return entry[0] if entry else ActionCategory.GENERIC


def summarize_tool_call(
    name: str | None,
    arguments: Any,
    max_description_chars: int = DEFAULT_DESCRIPTION_MAX_CHARS,
) -> ToolSummary:
    """Main entry point — category, title and description for one call."""
    title = coerce_text(name) or "tool"
    canonical = normalize_tool_name(name)
    entry = _KNOWN_TOOLS.get(canonical)

    if entry is None:
        raw = arguments if isinstance(arguments, str) else coerce_text(arguments)
        return ToolSummary(
            category=ActionCategory.GENERIC,
            title=title,
            description=truncate(raw.strip(), max_description_chars),
        )

    category, keys = entry
    args = parse_args(arguments)
    describer = _DESCRIBERS.get(canonical)
    description = describer(args) if describer else _first_value(args, keys)
    # Multi-line commands and patches collapse to their first line.
    description = description.splitlines()[0] if description else ""
    return ToolSummary(
        category=category,
        title=title,
        description=truncate(description, max_description_chars),
    )
