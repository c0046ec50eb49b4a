from forum_bridge.services import post_renderer, reply_threading
from forum_bridge.services.models import Post
from forum_bridge.services.post_renderer import render_topic


def _posts() -> list[Post]:
    return [
        Post(
            id=11,
            post_number=1,
            username="alice",
            cooked=(
                "<p>My new Speedmaster :)</p>"
                '<div class="lightbox-wrapper"><a class="lightbox" href="/uploads/full.jpeg">'
                '<img src="/uploads/small.jpeg" alt="Speedmaster" width="690" height="517">'
                '<div class="meta"><span class="filename">IMG_0042.jpeg</span>'
                '<span class="informations">4032×3024 2.1 MB</span></div></a></div>'
            ),
        ),
        Post(
            id=12,
            post_number=2,
            username="bob",
            reply_to_post_number=1,
            cooked='<p>Congrats <img src="/images/emoji/twitter/tada.png" class="emoji" alt=":tada:"></p>',
        ),
        Post(
            id=13,
            post_number=3,
            username="carol",
            reply_to_post_number=2,
            cooked='<p>Agreed</p><p><img src="https://media.example.com/clap.gif"></p>',
        ),
    ]


def test_render_topic_builds_render_ready_posts() -> None:
    rendered = render_topic(_posts())

    first, second, third = rendered
    assert first.text == "My new Speedmaster \U0001F60A"
    assert [image.url for image in first.images] == ["https://www.horlogeforum.nl/uploads/small.jpeg"]
    assert first.images[0].width == 690
    assert first.depth == 0
    assert first.reply_post_numbers == [2]
    assert first.quoted_post_number is None

    assert second.text == "Congrats \U0001F389"
    assert second.images == []
    assert second.depth == 1
    assert second.quoted_post_number == 1
    assert second.quoted_content == "My new Speedmaster :)"
    assert second.reply_post_numbers == [3]

    assert third.depth == 2
    assert third.gifs == ["https://media.example.com/clap.gif"]
    assert third.text == "Agreed"
    assert [chunk.text for chunk in third.chunks] == ["Agreed"]


def test_render_topic_builds_index_once(monkeypatch) -> None:
    calls: list[int] = []
    original = reply_threading.build_post_index

    def _counting(posts):
        calls.append(1)
        return original(posts)

    monkeypatch.setattr(post_renderer, "build_post_index", _counting)
    monkeypatch.setattr(reply_threading, "build_post_index", _counting)

    render_topic(_posts())

    assert len(calls) == 1


def test_render_topic_uses_base_url() -> None:
    rendered = render_topic(_posts()[:1], base_url="https://forum.example.org")
    assert rendered[0].images[0].url == "https://forum.example.org/uploads/small.jpeg"


def test_rendered_post_serializes() -> None:
    payload = render_topic(_posts())[1].as_dict()
    assert payload["post"]["post_number"] == 2
    assert payload["quoted_post_number"] == 1
    assert payload["chunks"] == [{"id": "0", "text": "Congrats \U0001F389", "char_count": 10}]


def test_render_topic_of_empty_thread() -> None:
    assert render_topic([]) == []
