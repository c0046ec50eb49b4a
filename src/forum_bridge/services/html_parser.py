import logging
import re

from forum_bridge.services.image_parser import emoji_from_image, is_emoji_image

logger = logging.getLogger(__name__)

_IMG_TAG_RE = re.compile(r"<img\b[^>]*>", re.IGNORECASE)
_SRC_ATTR_RE = re.compile(r"""\bsrc\s*=\s*["']([^"']+)["']""", re.IGNORECASE)
_ALT_ATTR_RE = re.compile(r"""\balt\s*=\s*["']([^"']*)["']""", re.IGNORECASE)
_META_DIV_RE = re.compile(r"""<div\s+class=["']meta["'][^>]*>.*?</div>""", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]*>")
_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_BLOCK_CLOSE_RE = re.compile(r"</(?:p|div|blockquote|aside|li|ul|ol|pre|h[1-6])\s*>", re.IGNORECASE)

# &amp; goes last so "&amp;lt;" decodes to "&lt;" rather than "<".
_ENTITIES = (
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&amp;", "&"),
)

_SIZE = r"\d+(?:\.\d+)?\s*(?:KB|MB|GB)\b"

# Attachment captions Discourse leaves next to images, e.g.
# "IMG_20260108_143048-1920×2400 227 KB" or "image562×750 60.2 KB".
# Ordered from most specific to most general.
METADATA_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(rf"\d+[×x]\d+\s+{_SIZE}", re.IGNORECASE), ""),
    (re.compile(rf"[\w.-]+\d+[×x]\d+\s+{_SIZE}", re.IGNORECASE), ""),
    (re.compile(rf"\b[\w.-]+\.(?:jpg|jpeg|png|gif|webp|bmp)\s+{_SIZE}", re.IGNORECASE), ""),
    (re.compile(r"\b\d{3,4}[×x]\d{3,4}\b"), ""),
    (re.compile(rf"\b{_SIZE}", re.IGNORECASE), ""),
    (re.compile(rf"\bimage\d+[×x]\d+\s+{_SIZE}", re.IGNORECASE), ""),
    (re.compile(r"\bimage\d+[×x]\d+\b", re.IGNORECASE), ""),
    (re.compile(r"\b[\w.-]+?\d+[×x]\d+\b", re.IGNORECASE), ""),
    (re.compile(r"\b\w*\d+[×x]\d+\w*\b", re.IGNORECASE), ""),
]


def _replace_emoji_image(match: re.Match[str]) -> str:
    tag = match.group(0)
    src_match = _SRC_ATTR_RE.search(tag)
    if not src_match:
        return tag
    alt_match = _ALT_ATTR_RE.search(tag)
    alt = alt_match.group(1) if alt_match else None
    if not is_emoji_image(src_match.group(1), alt):
        return tag
    return emoji_from_image(alt) or tag


def convert_emoji_images_to_text(html: str) -> str:
    if not html:
        return ""
    return _IMG_TAG_RE.sub(_replace_emoji_image, html)


def decode_entities(text: str) -> str:
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text


def remove_image_metadata(text: str) -> str:
    for pattern, replacement in METADATA_RULES:
        text = pattern.sub(replacement, text)
    return text


def _clean_markup(html: str, *, keep_paragraphs: bool) -> str:
    content = convert_emoji_images_to_text(html)
    content = _IMG_TAG_RE.sub("", content)
    content = _META_DIV_RE.sub("", content)
    if keep_paragraphs:
        content = _BR_RE.sub("\n", content)
        content = _BLOCK_CLOSE_RE.sub("\n\n", content)
    content = _TAG_RE.sub("", content)
    content = decode_entities(content)
    return remove_image_metadata(content)


def strip_html_tags(html: str) -> str:
    """
    Flatten cooked post HTML to a single line of plain text.

    Emoji images become their characters, other images and attachment
    captions are dropped (images are surfaced by ``parse_images_from_html``).
    """
    if not html:
        return ""

    content = _clean_markup(html, keep_paragraphs=False)
    content = re.sub(r"\s+", " ", content).strip()
    logger.debug(
        "Stripped post HTML",
        extra={"event": "html_stripped", "input_chars": len(html), "output_chars": len(content)},
    )
    return content


def html_to_text(html: str) -> str:
    """Like ``strip_html_tags`` but keeps line and paragraph breaks for chunking."""
    if not html:
        return ""

    content = _clean_markup(html, keep_paragraphs=True)
    content = re.sub(r"[^\S\n]+", " ", content)
    content = re.sub(r" *\n *", "\n", content)
    content = re.sub(r"\n{3,}", "\n\n", content)
    return content.strip()
