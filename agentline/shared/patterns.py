"""Text matchers shared by the turn builder, status inference and mention input.

All matchers are module-level compiled patterns used through ``finditer`` /
``search``. They hold no cursor state and can serve several transcripts at once.

Provides:
- legacy inline tool-log blocks (``> Executing tool: `name` ... ```result````)
- plan-shaped lines (numbered, checkbox, bullet)
- ``@path`` mentions, in rendered text and in draft input
- error-signal classification of tool result text
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from agentline.shared.normalize import coerce_text


# ── Legacy tool logs ─────────────────────────────────────────

# The span between header and fence never crosses into the next header, so a
# header without a result block does not swallow the following tool.
LEGACY_TOOL_LOG = re.compile(
    r"> Executing tool: `([^`]+)`"
    r"(?:(?!> Executing tool:)[\s\S])*?"
    r"(?:> Result:\s*)?```\n?([\s\S]*?)```"
)
LEGACY_TOOL_HEADER = re.compile(r"> Executing tool: `([^`]+)`")


@dataclass(frozen=True)
class LegacyToolMention:
    """A tool execution recorded inline in assistant text."""

    name: str
    result: str
    start: int
    end: int


def find_legacy_tool_logs(text: str | None) -> list[LegacyToolMention]:
    """Return every non-overlapping legacy tool-log block in *text*."""
    text = coerce_text(text)
    if not text:
        return []
    return [
        LegacyToolMention(
            name=m.group(1), result=m.group(2), start=m.start(), end=m.end(),
        )
        for m in LEGACY_TOOL_LOG.finditer(text)
    ]


def strip_legacy_tool_logs(text: str | None) -> str:
    """Remove legacy tool-log blocks and trim what is left."""
    text = coerce_text(text)
    if not text:
        return ""
    return LEGACY_TOOL_LOG.sub("", text).strip()


def legacy_tool_names(text: str | None) -> list[str]:
    """Names from ``> Executing tool:`` headers, result block or not."""
    text = coerce_text(text)
    if not text:
        return []
    return LEGACY_TOOL_HEADER.findall(text)


# ── Plan lines ───────────────────────────────────────────────

PLAN_NUMBERED = re.compile(r"^\s*\d+[.)]\s+(.*)$")
PLAN_CHECKBOX = re.compile(r"^\s*[-*]\s+\[([ xX])\]\s+(.*)$")
PLAN_BULLET = re.compile(r"^\s*[-*]\s+(.*)$")


@dataclass(frozen=True)
class PlanLine:
    kind: str  # "numbered", "checkbox" or "bullet"
    text: str
    completed: bool = False


def match_plan_line(line: str, in_plan: bool = False) -> PlanLine | None:
    """Classify one line as a plan step.

    Numbered and checkbox lines always match and open a plan block. Plain
    bullets only count while a block is already open.
    """
    m = PLAN_CHECKBOX.match(line)
    if m:
        return PlanLine(
            kind="checkbox",
            text=m.group(2).strip(),
            completed=m.group(1).lower() == "x",
        )
    m = PLAN_NUMBERED.match(line)
    if m:
        return PlanLine(kind="numbered", text=m.group(1).strip())
    if in_plan:
        m = PLAN_BULLET.match(line)
        if m:
            return PlanLine(kind="bullet", text=m.group(1).strip())
    return None


# ── Mentions ─────────────────────────────────────────────────

# Rendered text: any @ followed by path characters.
MENTION = re.compile(r"@[\w./-]+")
# Draft input: the @ must start the text or follow whitespace/an opening bracket,
# so "me@host.com" and "obj@attr" are left alone.
INPUT_MENTION = re.compile(r"(?:^|(?<=[\s(\[{<]))@([\w./-]+)")
# Mention being typed, anchored at the end of the text left of the caret.
OPEN_MENTION = re.compile(r"(?:^|(?<=[\s(\[{<]))@([\w./-]*)\Z")


def find_mentions(text: str | None) -> list[tuple[str, int, int]]:
    """``(token, start, end)`` for each mention in rendered message text."""
    text = coerce_text(text)
    if not text:
        return []
    return [(m.group(0), m.start(), m.end()) for m in MENTION.finditer(text)]


# ── Error signal ─────────────────────────────────────────────

def is_error_result(text: str | None) -> bool:
    """Whether tool result text reads as a failure."""
    text = coerce_text(text)
    if not text:
        return False
    lower = text.lower()
    return "error" in lower or "denied" in lower or lower.lstrip().startswith("err")
