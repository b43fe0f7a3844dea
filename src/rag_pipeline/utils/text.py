"""Text helpers for cleaning generated output and building cache keys."""

import hashlib
import json
import re
from typing import Any

_HEADER_RE = re.compile(r"^#{1,6}\s*", re.MULTILINE)
_RULE_RE = re.compile(r"^[-*_]{3,}\s*$", re.MULTILINE)
_BLANK_LINES_RE = re.compile(r"\n{3,}")
_FENCE_RE = re.compile(r"^```[a-zA-Z0-9_-]*\s*\n?(.*?)\n?```\s*$", re.DOTALL)


def clean_markdown(text: str | None) -> str:
    """Strip markdown artifacts a model tends to add to plain-text output.

    Removes heading markers and horizontal rules, collapses runs of blank
    lines and trims the result. Inline formatting is kept.

    Args:
        text: Generated text

    Returns:
        Cleaned text ("" for None)
    """
    if not text:
        return ""

    cleaned = _HEADER_RE.sub("", text)
    cleaned = _RULE_RE.sub("", cleaned)
    cleaned = _BLANK_LINES_RE.sub("\n\n", cleaned)
    return cleaned.strip()


def strip_code_fences(text: str | None) -> str:
    """Remove a surrounding ```json ... ``` fence if the model added one."""
    if not text:
        return ""
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    if match:
        return match.group(1).strip()
    return stripped


def stable_hash(*parts: Any) -> str:
    """Process-independent hash of the given parts.

    Non-string parts are JSON-encoded with sorted keys so equal mappings
    hash equally.

    Example:
        ```python
        stable_hash("hello")              # same value in every process
        stable_hash({"b": 1, "a": 2}, "en")
        ```
    """
    digest = hashlib.sha256()
    for part in parts:
        if isinstance(part, str):
            encoded = part
        else:
            encoded = json.dumps(part, sort_keys=True, ensure_ascii=False, default=str)
        digest.update(encoded.encode("utf-8"))
        digest.update(b"\x1f")
    return digest.hexdigest()
