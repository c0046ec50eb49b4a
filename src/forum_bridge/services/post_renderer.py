import logging
from typing import Sequence

from forum_bridge.services.emoji_parser import convert_emoticon_to_emoji, extract_gif_urls
from forum_bridge.services.html_parser import html_to_text, strip_html_tags
from forum_bridge.services.image_parser import DEFAULT_FORUM_URL, parse_images_from_html
from forum_bridge.services.models import Post, RenderedPost
from forum_bridge.services.reply_threading import (
    PostIndex,
    build_post_index,
    get_reply_depth,
    resolve_quoted_post,
)
from forum_bridge.services.text_chunker import chunk_text

logger = logging.getLogger(__name__)


def _replies_by_target(posts: Sequence[Post]) -> dict[int, list[int]]:
    replies: dict[int, list[int]] = {}
    for post in posts:
        if post.reply_to_post_number:
            replies.setdefault(post.reply_to_post_number, []).append(post.post_number)
    return replies


def render_post(
    post: Post,
    index: PostIndex,
    *,
    reply_post_numbers: Sequence[int] = (),
    base_url: str = DEFAULT_FORUM_URL,
) -> RenderedPost:
    text = convert_emoticon_to_emoji(html_to_text(post.cooked))
    quoted = resolve_quoted_post(post, index)

    return RenderedPost(
        post=post,
        text=text,
        images=parse_images_from_html(post.cooked, base_url),
        gifs=extract_gif_urls(post.cooked),
        chunks=chunk_text(text),
        depth=get_reply_depth(post, index),
        quoted_post_number=quoted.post_number if quoted else None,
        quoted_content=strip_html_tags(quoted.cooked) if quoted else None,
        reply_post_numbers=list(reply_post_numbers),
    )


def render_topic(posts: Sequence[Post], *, base_url: str = DEFAULT_FORUM_URL) -> list[RenderedPost]:
    index = build_post_index(posts)
    replies = _replies_by_target(posts)

    rendered = [
        render_post(
            post,
            index,
            reply_post_numbers=replies.get(post.post_number, ()),
            base_url=base_url,
        )
        for post in posts
    ]

    logger.info(
        "Rendered topic posts",
        extra={
            "event": "topic_rendered",
            "post_count": len(rendered),
            "chunk_count": sum(len(item.chunks) for item in rendered),
            "image_count": sum(len(item.images) for item in rendered),
        },
    )
    return rendered
