"""Text normalization shared by the loader and the reconstruction engine."""

from __future__ import annotations

import json
from typing import Any


def coerce_text(value: Any) -> str:
    """Render arbitrary values into stable text for transcript storage."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, ensure_ascii=False, sort_keys=True)
    except (TypeError, ValueError):
        return str(value)
