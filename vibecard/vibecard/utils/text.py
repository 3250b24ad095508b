"""Text clean-up applied to scraped content before it reaches a prompt."""

from __future__ import annotations

import re

_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    ("email", re.compile(r"[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+")),
    ("phone", re.compile(r"(?:\+?\d{1,3}[-.\s]?)?\(?\d{2,4}\)?[-.\s]?\d{3,4}[-.\s]?\d{4}\b")),
]
_WHITESPACE_RE = re.compile(r"[ \t]+")
_BLANK_LINES_RE = re.compile(r"\n{3,}")


def redact(text: str) -> str:
    """Replace emails and phone numbers with a placeholder."""
    for _name, pattern in _PATTERNS:
        text = pattern.sub("[REDACTED]", text)
    return text


def normalize(text: str) -> str:
    text = _WHITESPACE_RE.sub(" ", text.replace("\r\n", "\n"))
    return _BLANK_LINES_RE.sub("\n\n", text).strip()


def first_line(text: str | None) -> str:
    if not text:
        return ""
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""


def clip(text: str, max_chars: int) -> str:
    return text if len(text) <= max_chars else text[:max_chars]


def numbered(lines: list[str]) -> str:
    """Render ``1. foo`` style lists for prompts; ``(none)`` when empty."""
    if not lines:
        return "(none)"
    return "\n".join(f"{i}. {line}" for i, line in enumerate(lines, 1))
