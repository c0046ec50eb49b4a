from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Union

from forum_bridge.services.html_parser import strip_html_tags
from forum_bridge.services.models import Post, QuotedPostContext

# Hard stop for reply walks over cyclic or corrupted reply_to_post_number chains.
MAX_REPLY_DEPTH = 10

PostIndex = Mapping[int, Post]
PostsOrIndex = Union[Sequence[Post], PostIndex]


def build_post_index(posts: Iterable[Post]) -> dict[int, Post]:
    """Map post_number to post; a later duplicate post_number wins."""
    return {post.post_number: post for post in posts}


def _as_index(posts: PostsOrIndex) -> PostIndex:
    if isinstance(posts, Mapping):
        return posts
    return build_post_index(posts)


def resolve_quoted_post(post: Post, index: PostIndex) -> Post | None:
    if not post.reply_to_post_number:
        return None
    return index.get(post.reply_to_post_number)


def get_reply_depth(post: Post, posts: PostsOrIndex) -> int:
    """
    Count hops from ``post`` back to a root post along reply links.

    Only hops to posts present in the thread count, so a dangling reply
    target leaves a post at depth 0. The walk stops after ``MAX_REPLY_DEPTH``
    hops. Pass a prebuilt index when calling this for every post of a thread.
    """
    index = _as_index(posts)
    if post.post_number not in index:
        return 0

    depth = 0
    current = post
    while depth < MAX_REPLY_DEPTH:
        parent = resolve_quoted_post(current, index)
        if parent is None:
            break
        depth += 1
        current = parent

    return depth


def get_replies_to(post: Post, posts: Iterable[Post]) -> list[Post]:
    return [p for p in posts if p.reply_to_post_number == post.post_number]


def enrich_with_quotes(posts: Sequence[Post], index: PostIndex | None = None) -> list[QuotedPostContext]:
    index = index if index is not None else build_post_index(posts)
    enriched: list[QuotedPostContext] = []

    for post in posts:
        quoted = resolve_quoted_post(post, index)
        if quoted is None:
            enriched.append(QuotedPostContext(post=post))
            continue
        enriched.append(
            QuotedPostContext(
                post=post,
                quoted_post=quoted,
                quoted_content=strip_html_tags(quoted.cooked),
            )
        )

    return enriched
