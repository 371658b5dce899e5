"""Split assistant prose into titled sections for card-style rendering."""

from __future__ import annotations

import re

from agentline.shared.models.activity import ResponseSection
from agentline.shared.normalize import coerce_text

_LABEL = re.compile(r"^(Summary|Plan|Changes|Tests|Next(?: Steps)?):\s*(.*)$", re.IGNORECASE)
_HEADING = re.compile(r"^#{2,3}\s+(.*)$")

DEFAULT_TITLE = "Response"


def split_response_sections(text: str | None) -> list[ResponseSection]:
    """Group lines under ``Label:`` markers and ``##``/``###`` headings.

    Lines before the first marker belong to a "Response" section. Sections
    with no body are dropped; if nothing remains, the whole text becomes one
    "Response" section (empty text gives no sections).
    """
    text = coerce_text(text)
    if not text.strip():
        return []

    sections: list[ResponseSection] = []
    title = DEFAULT_TITLE
    body: list[str] = []

    def flush() -> None:
        joined = "\n".join(body).strip()
        if joined:
            sections.append(ResponseSection(title=title, body=joined))

    for line in text.splitlines():
        label = _LABEL.match(line)
        if label:
            flush()
            title = label.group(1)
            body = [label.group(2)] if label.group(2) else []
            continue
        heading = _HEADING.match(line)
        if heading:
            flush()
            title = heading.group(1).strip()
            body = []
            continue
        body.append(line)
    flush()

    return sections or [ResponseSection(title=DEFAULT_TITLE, body=text.strip())]
