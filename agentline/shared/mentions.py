"""@-mention handling for the draft prompt input.

Works purely on the literal text and a caret offset: nothing is remembered
between keystrokes, every edit recomputes token positions from the current
text. The file index is a plain list of workspace-relative paths.

Provides:
- find_open_mention: the ``@query`` being typed left of the caret
- find_closed_mentions: finished ``@path`` tokens with exact offsets
- suggest_paths: ranked completions for an open query
- insert_mention / remove_mention / replace_mention: text edits with caret
- analyze_input: everything a prompt widget needs for one keystroke
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from agentline.shared.normalize import coerce_text
from agentline.shared.patterns import INPUT_MENTION, OPEN_MENTION

DEFAULT_SUGGESTION_LIMIT = 10


# ── Data models ──────────────────────────────────────────────

@dataclass(frozen=True)
class OpenMention:
    """A mention still being typed: ``text[start:end]`` is ``"@" + query``."""

    query: str
    start: int
    end: int


@dataclass(frozen=True)
class MentionToken:
    """A finished mention; ``text[start:end]`` is ``"@" + path``."""

    path: str
    start: int
    end: int


@dataclass(frozen=True)
class MentionSuggestion:
    path: str
    display_name: str


@dataclass(frozen=True)
class InputEdit:
    """Result of an edit: the new text and where the caret goes."""

    text: str
    caret: int


@dataclass
class MentionState:
    open_query: str | None = None
    suggestions: list[MentionSuggestion] = field(default_factory=list)
    closed_tokens: list[MentionToken] = field(default_factory=list)


# ── Scanning ─────────────────────────────────────────────────

def _clamp(text: str, caret: int | None) -> int:
    if caret is None:
        return len(text)
    return max(0, min(int(caret), len(text)))


def find_open_mention(text: str | None, caret: int | None) -> OpenMention | None:
    """Return the mention under composition immediately left of the caret."""
    text = coerce_text(text)
    caret = _clamp(text, caret)
    m = OPEN_MENTION.search(text, 0, caret)
    if m is None:
        return None
    return OpenMention(query=m.group(1), start=m.start(), end=caret)


def find_closed_mentions(
    text: str | None, caret: int | None = None,
) -> list[MentionToken]:
    """All finished mention tokens in *text*.

    With a caret, the token currently being typed (the open mention) is
    excluded.
    """
    text = coerce_text(text)
    open_mention = find_open_mention(text, caret) if caret is not None else None
    tokens: list[MentionToken] = []
    for m in INPUT_MENTION.finditer(text):
        if open_mention is not None and m.start() == open_mention.start:
            continue
        tokens.append(MentionToken(path=m.group(1), start=m.start(), end=m.end()))
    return tokens


# ── Suggestions ──────────────────────────────────────────────

def display_name(path: str) -> str:
    """Last path component; directories keep their trailing slash."""
    trimmed = path.replace("\\", "/")
    is_dir = trimmed.endswith("/")
    parts = [p for p in trimmed.split("/") if p]
    if not parts:
        return path
    return parts[-1] + ("/" if is_dir else "")


def suggest_paths(
    query: str | None,
    file_index: Iterable[str],
    limit: int = DEFAULT_SUGGESTION_LIMIT,
) -> list[MentionSuggestion]:
    """Return index paths matching *query*.

    Two-tier matching: path-prefix matches first, then substring
    matches anywhere in the path. Both are case-insensitive, and index order
    is kept within each tier.
    """
    paths = [p for p in (file_index or []) if isinstance(p, str) and p]
    if limit <= 0:
        return []
    if not query:
        matches = paths
    else:
        query_lower = coerce_text(query).lower()
        prefix_matches = []
        substring_matches = []
        for path in paths:
            path_lower = path.lower()
            if path_lower.startswith(query_lower):
                prefix_matches.append(path)
            elif query_lower in path_lower:
                substring_matches.append(path)
        matches = prefix_matches + substring_matches
    return [
        MentionSuggestion(path=p, display_name=display_name(p))
        for p in matches[:limit]
    ]


# ── Edits ────────────────────────────────────────────────────

def insert_mention(text: str | None, caret: int | None, path: str) -> InputEdit:
    """Insert ``@path `` at the caret, replacing an open mention if present.

    Without an open mention, a space is added first when the caret sits right
    after a word, so the new token is still recognised as a mention.
    """
    text = coerce_text(text)
    caret = _clamp(text, caret)
    open_mention = find_open_mention(text, caret)
    start = open_mention.start if open_mention else caret
    inserted = f"@{path} "
    if open_mention is None and start > 0 and not _opens_mention(text[start - 1]):
        inserted = " " + inserted
    return InputEdit(text=text[:start] + inserted + text[caret:], caret=start + len(inserted))


def _opens_mention(char: str) -> bool:
    """Whether an ``@`` right after *char* starts a mention token."""
    return char.isspace() or char in "([{<"


def _whitespace_span(text: str, start: int, end: int) -> tuple[int, int]:
    """Widen ``[start, end)`` by one adjacent whitespace character."""
    if end < len(text) and text[end].isspace():
        return start, end + 1
    if start > 0 and text[start - 1].isspace():
        return start - 1, end
    return start, end


def remove_mention(text: str | None, token: MentionToken) -> InputEdit:
    """Delete a token plus one adjacent whitespace character."""
    text = coerce_text(text)
    start, end = _whitespace_span(text, _clamp(text, token.start), _clamp(text, token.end))
    return InputEdit(text=text[:start] + text[end:], caret=start)


def replace_mention(text: str | None, token: MentionToken) -> InputEdit:
    """Re-open a token as a bare ``@`` at its start so it can be re-picked."""
    text = coerce_text(text)
    start = _clamp(text, token.start)
    end = _clamp(text, token.end)
    return InputEdit(text=text[:start] + "@" + text[end:], caret=start + 1)


def analyze_input(
    text: str | None,
    caret: int | None,
    file_index: Iterable[str],
    limit: int = DEFAULT_SUGGESTION_LIMIT,
) -> MentionState:
    """Open query, its suggestions, and the closed tokens for one keystroke."""
    text = coerce_text(text)
    caret = _clamp(text, caret)
    open_mention = find_open_mention(text, caret)
    return MentionState(
        open_query=open_mention.query if open_mention else None,
        suggestions=(
            suggest_paths(open_mention.query, file_index, limit)
            if open_mention else []
        ),
        closed_tokens=find_closed_mentions(text, caret),
    )
