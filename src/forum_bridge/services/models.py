from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


def _coerce_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _coerce_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass(frozen=True)
class Post:
    """The subset of a Discourse post record the render pipeline reads."""

    id: int
    post_number: int
    cooked: str = ""
    username: str = ""
    created_at: str = ""
    reply_to_post_number: int | None = None
    name: str = ""
    display_username: str = ""
    avatar_template: str = ""
    topic_id: int | None = None
    reply_count: int = 0

    @classmethod
    def from_discourse(cls, payload: Mapping[str, Any]) -> "Post":
        reply_to = _coerce_int(payload.get("reply_to_post_number"))
        return cls(
            id=_coerce_int(payload.get("id")) or 0,
            post_number=_coerce_int(payload.get("post_number")) or 0,
            cooked=_coerce_str(payload.get("cooked")),
            username=_coerce_str(payload.get("username")),
            created_at=_coerce_str(payload.get("created_at")),
            # Discourse sends 0 or null for "not a reply"
            reply_to_post_number=reply_to or None,
            name=_coerce_str(payload.get("name")),
            display_username=_coerce_str(payload.get("display_username")),
            avatar_template=_coerce_str(payload.get("avatar_template")),
            topic_id=_coerce_int(payload.get("topic_id")),
            reply_count=_coerce_int(payload.get("reply_count")) or 0,
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "post_number": self.post_number,
            "reply_to_post_number": self.reply_to_post_number,
            "username": self.username,
            "name": self.name,
            "display_username": self.display_username,
            "avatar_template": self.avatar_template,
            "created_at": self.created_at,
            "topic_id": self.topic_id,
            "reply_count": self.reply_count,
        }


@dataclass(frozen=True)
class ParsedImage:
    url: str
    alt: str | None = None
    width: int | None = None
    height: int | None = None

    def as_dict(self) -> dict[str, Any]:
        return {"url": self.url, "alt": self.alt, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class TextChunk:
    id: str
    text: str
    char_count: int

    def as_dict(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text, "char_count": self.char_count}


@dataclass(frozen=True)
class TextStats:
    words: int
    chars: int
    lines: int
    paragraphs: int
    reading_time: int

    def as_dict(self) -> dict[str, int]:
        return {
            "words": self.words,
            "chars": self.chars,
            "lines": self.lines,
            "paragraphs": self.paragraphs,
            "reading_time": self.reading_time,
        }


@dataclass(frozen=True)
class Highlight:
    start: int
    end: int


@dataclass(frozen=True)
class QuotedPostContext:
    """A post paired with the post it replies to, when that post is in the thread."""

    post: Post
    quoted_post: Post | None = None
    quoted_content: str | None = None


@dataclass(frozen=True)
class RenderedPost:
    post: Post
    text: str
    images: list[ParsedImage] = field(default_factory=list)
    gifs: list[str] = field(default_factory=list)
    chunks: list[TextChunk] = field(default_factory=list)
    depth: int = 0
    quoted_post_number: int | None = None
    quoted_content: str | None = None
    reply_post_numbers: list[int] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {
            "post": self.post.as_dict(),
            "text": self.text,
            "images": [image.as_dict() for image in self.images],
            "gifs": list(self.gifs),
            "chunks": [chunk.as_dict() for chunk in self.chunks],
            "depth": self.depth,
            "quoted_post_number": self.quoted_post_number,
            "quoted_content": self.quoted_content,
            "reply_post_numbers": list(self.reply_post_numbers),
        }
