"""Literal, case-insensitive highlight spans for display text."""

import html
import re
from dataclasses import dataclass
from typing import List, Tuple

# --- Module-level constants ---
DEFAULT_MARK_STYLE = "background-color: #facc15; color: #111827;"


@dataclass(frozen=True)
class HighlightSpan:
    """A contiguous piece of display text, flagged if it matched the term."""
    matched: bool
    text: str


def highlight_spans(text: str, term: str) -> Tuple[HighlightSpan, ...]:
    """
    Split text into matched and unmatched spans for a highlight term.

    The term is matched literally (never as a pattern), case-insensitively,
    for every non-overlapping occurrence. Concatenating the span texts always
    gives back the original text.

    Args:
        text: Display text to annotate
        term: Highlight term typed by the user

    Returns:
        Ordered spans; a single unmatched span when the term is blank
    """
    if not term.strip():
        return (HighlightSpan(matched=False, text=text),) if text else ()

    pattern = re.compile(re.escape(term), re.IGNORECASE)
    spans: List[HighlightSpan] = []
    cursor = 0
    for match in pattern.finditer(text):
        start, end = match.span()
        if start > cursor:
            spans.append(HighlightSpan(matched=False, text=text[cursor:start]))
        spans.append(HighlightSpan(matched=True, text=text[start:end]))
        cursor = end
    if cursor < len(text):
        spans.append(HighlightSpan(matched=False, text=text[cursor:]))
    return tuple(spans)


def spans_to_html(spans: Tuple[HighlightSpan, ...], mark_style: str = DEFAULT_MARK_STYLE) -> str:
    """Render spans as escaped rich text suitable for QLabel/QTextEdit."""
    parts = []
    for span in spans:
        escaped = html.escape(span.text)
        if span.matched:
            escaped = f"<span style='{mark_style}'>{escaped}</span>"
        parts.append(escaped)
    return "".join(parts)
