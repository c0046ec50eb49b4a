import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from forum_bridge.services.models import Post
from forum_bridge.services.post_renderer import render_topic
from forum_bridge.services.quotes import Quote, QuoteCollection

if TYPE_CHECKING:
    from forum_bridge.services.discourse_client import DiscourseClient

logger = logging.getLogger(__name__)


class QuoteIn(BaseModel):
    post_number: int
    username: str
    text: str = Field(min_length=1)
    name: str = ""


class CreatePostRequest(BaseModel):
    raw: str = Field(min_length=1)
    topic_id: int | None = None
    title: str | None = None
    category: int | None = None
    reply_to_post_number: int | None = None
    quotes: list[QuoteIn] = Field(default_factory=list)
    api_key: str | None = None
    api_username: str | None = None


def posts_from_topic(payload: dict[str, Any]) -> list[Post]:
    stream = payload.get("post_stream") or {}
    raw_posts = stream.get("posts") or []
    posts = [Post.from_discourse(item) for item in raw_posts if isinstance(item, dict)]
    return sorted(posts, key=lambda post: post.post_number)


async def handle_rendered_topic(
    client: "DiscourseClient",
    topic_id: int,
    *,
    page: int | None = None,
) -> dict[str, Any]:
    payload = await client.topic_detail(topic_id, page=page)
    posts = posts_from_topic(payload)
    rendered = render_topic(posts, base_url=client.base_url)

    logger.info(
        "Rendered topic for client",
        extra={"event": "topic_render_served", "topic_id": topic_id, "page": page, "post_count": len(posts)},
    )
    return {
        "topic_id": payload.get("id", topic_id),
        "title": payload.get("title") or "",
        "posts_count": payload.get("posts_count") or len(posts),
        "posts": [item.as_dict() for item in rendered],
    }


def compose_raw(request: CreatePostRequest) -> str:
    if not request.quotes:
        return request.raw

    collection = QuoteCollection()
    for index, quote in enumerate(request.quotes):
        collection.add(
            Quote(
                id=str(index),
                post_id=quote.post_number,
                author_name=quote.name or quote.username,
                author_username=quote.username,
                selected_text=quote.text,
                timestamp="",
                topic_id=request.topic_id or 0,
            )
        )
    return f"{collection.format()}\n\n{request.raw}"


async def handle_create_post(client: "DiscourseClient", request: CreatePostRequest) -> dict[str, Any]:
    raw = compose_raw(request)

    if request.topic_id is not None:
        return await client.create_reply(
            request.topic_id,
            raw,
            reply_to_post_number=request.reply_to_post_number,
            api_key=request.api_key,
            api_username=request.api_username,
        )

    if not request.title or request.category is None:
        raise ValueError("title and category are required to create a topic")
    return await client.create_topic(
        request.title,
        raw,
        request.category,
        api_key=request.api_key,
        api_username=request.api_username,
    )
