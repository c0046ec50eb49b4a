from forum_bridge.services.models import Post
from forum_bridge.services.reply_threading import (
    MAX_REPLY_DEPTH,
    build_post_index,
    enrich_with_quotes,
    get_replies_to,
    get_reply_depth,
    resolve_quoted_post,
)


def _post(post_number: int, reply_to: int | None = None, cooked: str = "") -> Post:
    return Post(
        id=100 + post_number,
        post_number=post_number,
        reply_to_post_number=reply_to,
        cooked=cooked or f"<p>Post {post_number}</p>",
        username=f"user{post_number}",
    )


def _thread() -> list[Post]:
    return [
        _post(1, cooked="<p>First post</p>"),
        _post(2, reply_to=1, cooked="<p>Reply to first post</p>"),
        _post(3, reply_to=2),
        _post(4, reply_to=1),
    ]


def test_reply_depth_of_chain() -> None:
    posts = _thread()
    assert [get_reply_depth(post, posts) for post in posts] == [0, 1, 2, 1]


def test_reply_depth_accepts_prebuilt_index() -> None:
    posts = _thread()
    index = build_post_index(posts)
    assert [get_reply_depth(post, index) for post in posts] == [0, 1, 2, 1]


def test_reply_depth_terminates_on_cycle() -> None:
    posts = [_post(1, reply_to=2), _post(2, reply_to=1)]
    depth = get_reply_depth(posts[0], posts)
    assert depth < 15
    assert depth == MAX_REPLY_DEPTH


def test_reply_depth_terminates_on_self_reference() -> None:
    post = _post(5, reply_to=5)
    assert get_reply_depth(post, [post]) == MAX_REPLY_DEPTH


def test_reply_depth_of_dangling_reference_is_zero() -> None:
    posts = [_post(1), _post(7, reply_to=99)]
    assert get_reply_depth(posts[1], posts) == 0


def test_reply_depth_stops_at_missing_ancestor() -> None:
    posts = [_post(2, reply_to=1), _post(3, reply_to=2)]
    assert get_reply_depth(posts[1], posts) == 1


def test_reply_depth_without_posts_or_membership() -> None:
    assert get_reply_depth(_post(2, reply_to=1), []) == 0
    assert get_reply_depth(_post(9, reply_to=1), _thread()) == 0


def test_replies_to_keep_input_order() -> None:
    posts = _thread()
    assert [p.post_number for p in get_replies_to(posts[0], posts)] == [2, 4]
    assert [p.post_number for p in get_replies_to(posts[1], posts)] == [3]
    assert get_replies_to(posts[2], posts) == []
    assert get_replies_to(posts[0], []) == []


def test_resolve_quoted_post() -> None:
    posts = _thread()
    index = build_post_index(posts)
    assert resolve_quoted_post(posts[2], index) is posts[1]
    assert resolve_quoted_post(posts[0], index) is None
    assert resolve_quoted_post(_post(8, reply_to=42), index) is None


def test_enrich_with_quotes_attaches_plain_text() -> None:
    posts = _thread()
    enriched = enrich_with_quotes(posts)

    assert enriched[0].quoted_post is None
    assert enriched[0].quoted_content is None
    assert enriched[1].quoted_post is posts[0]
    assert enriched[1].quoted_content == "First post"
    assert enriched[2].quoted_content == "Reply to first post"
