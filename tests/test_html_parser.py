from forum_bridge.services.html_parser import (
    convert_emoji_images_to_text,
    html_to_text,
    remove_image_metadata,
    strip_html_tags,
)


def test_strip_removes_tags_and_images() -> None:
    result = strip_html_tags('<p>Check this photo:</p><img src="test.jpg" />')
    assert result == "Check this photo:"


def test_strip_returns_empty_for_empty_input() -> None:
    assert strip_html_tags("") == ""


def test_strip_keeps_ordinary_numeric_prose() -> None:
    assert strip_html_tags("<p>I have 3 cameras and 5 lenses</p>") == "I have 3 cameras and 5 lenses"


def test_strip_removes_img_prefixed_caption() -> None:
    result = strip_html_tags("Check this: IMG_20260108_143048-11920×2400 227 KB")
    assert "Check this" in result
    assert "227 KB" not in result


def test_strip_removes_timestamp_caption() -> None:
    result = strip_html_tags("<p>Great photo!</p><p>20260123_1634511920×2560 352 KB</p>")
    assert "Great photo" in result
    assert "352 KB" not in result
    assert "×" not in result


def test_strip_removes_long_numeric_id_captions() -> None:
    html = (
        "Photo 1: 176335703935216634950995245793821920×2560 135 KB and "
        "Photo 2: 176335707948730142017258161383591920×2560 123 KB"
    )
    result = strip_html_tags(html)
    assert "Photo 1" in result
    assert "Photo 2" in result
    assert "135 KB" not in result
    assert "123 KB" not in result


def test_strip_removes_filename_with_size() -> None:
    result = strip_html_tags("Photo: image.jpg 1.5 MB and photo.png 2.25 MB")
    assert result.startswith("Photo")
    assert "MB" not in result
    assert "image.jpg" not in result


def test_strip_removes_dash_separated_dimensions() -> None:
    result = strip_html_tags("Photo: photo-1920x1080 500 KB")
    assert "Photo" in result
    assert "500 KB" not in result


def test_strip_drops_meta_div_of_lightbox() -> None:
    html = (
        '<div class="lightbox-wrapper"><a class="lightbox" href="/uploads/a.jpg">'
        '<img src="/uploads/a.jpg" width="690" height="460">'
        '<div class="meta"><span class="filename">IMG_1234.jpg</span>'
        '<span class="informations">1920×1080 300 KB</span></div></a></div>'
        "<p>Nice watch</p>"
    )
    assert strip_html_tags(html) == "Nice watch"


def test_strip_converts_emoji_images_to_characters() -> None:
    html = (
        '<p>Great <img src="/images/emoji/twitter/smile.png?v=12" title=":smile:" '
        'class="emoji" alt=":smile:"> work</p>'
    )
    assert strip_html_tags(html) == "Great \U0001F60A work"


def test_strip_decodes_entities() -> None:
    html = "<p>Tom &amp; Jerry &lt;3 &quot;cartoon&quot; it&#39;s&nbsp;fun</p>"
    assert strip_html_tags(html) == "Tom & Jerry <3 \"cartoon\" it's fun"


def test_strip_decodes_ampersand_once() -> None:
    assert strip_html_tags("<p>&amp;lt;b&amp;gt;</p>") == "&lt;b&gt;"


def test_convert_emoji_images_keeps_content_images() -> None:
    html = '<img src="https://example.com/watch.jpg" alt="Seiko">'
    assert convert_emoji_images_to_text(html) == html


def test_remove_image_metadata_strips_bare_dimensions() -> None:
    assert remove_image_metadata("screenshot 1920x1080").strip() == "screenshot"


def test_html_to_text_keeps_paragraphs_and_line_breaks() -> None:
    html = "<p>First paragraph</p><p>Second<br>line</p>"
    assert html_to_text(html) == "First paragraph\n\nSecond\nline"


def test_html_to_text_collapses_blank_runs() -> None:
    html = "<p>One</p>\n\n\n<p>Two</p>"
    assert html_to_text(html) == "One\n\nTwo"
