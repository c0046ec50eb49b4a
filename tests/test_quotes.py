from forum_bridge.services.models import Post
from forum_bridge.services.quotes import Quote, QuoteCollection, format_quote, quote_from_post


def _quote(quote_id: str, text: str, post_id: int = 3) -> Quote:
    return Quote(
        id=quote_id,
        post_id=post_id,
        author_name="Alice",
        author_username="alice",
        selected_text=text,
        timestamp="2026-01-01T00:00:00+00:00",
        topic_id=77,
    )


def test_format_quote_uses_discourse_bbcode() -> None:
    assert format_quote(_quote("a", "Nice dial")) == '[quote="alice, post:3, topic:77"]\nNice dial\n[/quote]'


def test_collection_formats_in_selection_order() -> None:
    quotes = QuoteCollection()
    quotes.add(_quote("a", "First"))
    quotes.add(_quote("b", "Second", post_id=5))

    assert quotes.format() == (
        '[quote="alice, post:3, topic:77"]\nFirst\n[/quote]\n\n'
        '[quote="alice, post:5, topic:77"]\nSecond\n[/quote]'
    )


def test_collection_update_remove_clear() -> None:
    quotes = QuoteCollection()
    quotes.add(_quote("a", "First"))
    quotes.add(_quote("b", "Second"))

    quotes.update("a", "Edited")
    assert [q.selected_text for q in quotes.quotes] == ["Edited", "Second"]

    quotes.remove("b")
    assert [q.id for q in quotes.quotes] == ["a"]

    quotes.clear()
    assert quotes.quotes == []
    assert quotes.format() == ""


def test_quote_from_post_uses_post_number() -> None:
    post = Post(id=501, post_number=4, username="bob", name="Bob B", cooked="<p>x</p>")
    quote = quote_from_post(post, "  selected words ", topic_id=9)

    assert quote.post_id == 4
    assert quote.author_username == "bob"
    assert quote.author_name == "Bob B"
    assert quote.selected_text == "selected words"
    assert quote.topic_id == 9
    assert quote.id
