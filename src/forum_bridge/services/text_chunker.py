from __future__ import annotations

import math
import re
from typing import Iterable

from forum_bridge.services.models import Highlight, TextChunk, TextStats

# Roughly 500-800 words per chunk.
MAX_CHARS_PER_CHUNK = 3000
MIN_CHARS_TO_CHUNK = 2000
PARAGRAPH_SEPARATOR = "\n\n"
WORDS_PER_MINUTE = 200
PREVIEW_WORD_BREAK_RATIO = 0.7


def chunk_text(text: str) -> list[TextChunk]:
    """
    Split long text into paragraph-aligned chunks for progressive display.

    Short text comes back as a single chunk. A paragraph longer than
    ``MAX_CHARS_PER_CHUNK`` is never split, it becomes one oversized chunk.
    """
    normalized = (text or "").strip()
    if len(normalized) < MIN_CHARS_TO_CHUNK:
        return [TextChunk(id="0", text=normalized, char_count=len(normalized))]

    chunks: list[TextChunk] = []
    current: list[str] = []
    current_len = 0

    def _flush() -> None:
        body = PARAGRAPH_SEPARATOR.join(current).strip()
        chunks.append(TextChunk(id=f"chunk-{len(chunks)}", text=body, char_count=len(body)))

    for paragraph in normalized.split(PARAGRAPH_SEPARATOR):
        trimmed = paragraph.strip()
        if not trimmed:
            continue

        if current and current_len + len(trimmed) > MAX_CHARS_PER_CHUNK:
            _flush()
            current = []
            current_len = 0

        if current:
            current_len += len(PARAGRAPH_SEPARATOR)
        current.append(trimmed)
        current_len += len(trimmed)

    if current:
        _flush()

    return chunks or [TextChunk(id="0", text=normalized, char_count=len(normalized))]


def get_text_preview(text: str, max_chars: int = 150) -> str:
    if len(text) <= max_chars:
        return text

    truncated = text[:max_chars]
    last_space = truncated.rfind(" ")
    if last_space > max_chars * PREVIEW_WORD_BREAK_RATIO:
        return truncated[:last_space] + "..."
    return truncated + "..."


def count_words(text: str) -> int:
    return len((text or "").split())


def calculate_reading_time(text: str) -> int:
    return max(1, math.ceil(count_words(text) / WORDS_PER_MINUTE))


def format_text_for_display(text: str) -> str:
    return re.sub(r"\n{3,}", "\n\n", text or "").strip()


def truncate_to_lines(text: str, max_lines: int) -> str:
    lines = text.split("\n")
    if len(lines) <= max_lines:
        return text
    return "\n".join(lines[:max_lines]) + "\n..."


def get_text_stats(text: str) -> TextStats:
    return TextStats(
        words=count_words(text),
        chars=len(text),
        lines=len(text.split("\n")),
        paragraphs=len(re.split(r"\n{2,}", text)),
        reading_time=calculate_reading_time(text),
    )


def highlight_search_terms(text: str, search_terms: Iterable[str]) -> tuple[str, list[Highlight]]:
    """Locate case-insensitive matches of each term; the text is returned unchanged."""
    highlights: list[Highlight] = []
    for term in search_terms:
        if not term:
            continue
        for match in re.finditer(re.escape(term), text, re.IGNORECASE):
            highlights.append(Highlight(start=match.start(), end=match.end()))

    highlights.sort(key=lambda h: h.start)
    return text, highlights
