from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone

from forum_bridge.services.models import Post


@dataclass(frozen=True)
class Quote:
    id: str
    post_id: int
    author_name: str
    author_username: str
    selected_text: str
    timestamp: str
    topic_id: int


def format_quote(quote: Quote) -> str:
    return (
        f'[quote="{quote.author_username}, post:{quote.post_id}, topic:{quote.topic_id}"]\n'
        f"{quote.selected_text}\n"
        "[/quote]"
    )


def quote_from_post(post: Post, selected_text: str, topic_id: int) -> Quote:
    return Quote(
        id=uuid.uuid4().hex,
        post_id=post.post_number,
        author_name=post.name or post.display_username or post.username,
        author_username=post.username,
        selected_text=selected_text.strip(),
        timestamp=datetime.now(timezone.utc).isoformat(),
        topic_id=topic_id,
    )


class QuoteCollection:
    """Quotes gathered from a topic while composing a reply, in selection order."""

    def __init__(self) -> None:
        self._quotes: list[Quote] = []

    @property
    def quotes(self) -> list[Quote]:
        return list(self._quotes)

    def add(self, quote: Quote) -> None:
        self._quotes.append(quote)

    def remove(self, quote_id: str) -> None:
        self._quotes = [q for q in self._quotes if q.id != quote_id]

    def update(self, quote_id: str, selected_text: str) -> None:
        self._quotes = [
            replace(q, selected_text=selected_text) if q.id == quote_id else q for q in self._quotes
        ]

    def clear(self) -> None:
        self._quotes = []

    def format(self) -> str:
        return "\n\n".join(format_quote(q) for q in self._quotes)
