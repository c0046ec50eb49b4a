import logging

from bs4 import BeautifulSoup

from forum_bridge.services.models import ParsedImage

logger = logging.getLogger(__name__)

DEFAULT_FORUM_URL = "https://www.horlogeforum.nl"

# Alt-text keywords of the emoji Discourse renders as <img class="emoji">.
EMOJI_IMAGE_MAP: dict[str, str] = {
    "crown": "\U0001F451",
    "heart": "❤️",
    "smile": "\U0001F60A",
    "laughing": "\U0001F604",
    "wink": "\U0001F609",
    "thumbsup": "\U0001F44D",
    "thumbsdown": "\U0001F44E",
    "fire": "\U0001F525",
    "star": "⭐",
    "tada": "\U0001F389",
    "rocket": "\U0001F680",
    "thinking": "\U0001F914",
    "eyes": "\U0001F440",
    "pray": "\U0001F64F",
    "clap": "\U0001F44F",
}

EMOJI_URL_FRAGMENTS = (
    "/emoji/",
    "/images/emoji/",
    "emoji.png",
    "emoji.svg",
    "cdn/emoji",
)

TRACKING_URL_FRAGMENTS = ("pixel", "beacon", "track")
TRACKING_DOMAINS = ("analytics", "doubleclick", "facebook.com/tr", "google-analytics")


def is_emoji_image(url: str, alt: str | None = None) -> bool:
    if not url:
        return False
    if any(fragment in url for fragment in EMOJI_URL_FRAGMENTS):
        return True
    if alt:
        lower_alt = alt.lower()
        return any(key in lower_alt for key in EMOJI_IMAGE_MAP)
    return False


def emoji_from_image(alt: str | None) -> str | None:
    """Resolve an emoji image to its character by alt text, e.g. ``:smile:``."""
    if not alt:
        return None

    lower_alt = alt.lower().strip()
    direct = EMOJI_IMAGE_MAP.get(lower_alt.strip(":"))
    if direct:
        return direct

    for key, emoji in EMOJI_IMAGE_MAP.items():
        if key in lower_alt:
            return emoji
    return None


def is_tracking_pixel(url: str) -> bool:
    if any(fragment in url for fragment in TRACKING_URL_FRAGMENTS):
        return True
    return any(domain in url for domain in TRACKING_DOMAINS)


def normalize_image_url(url: str, base_url: str = DEFAULT_FORUM_URL) -> str:
    base = base_url.rstrip("/")
    if url.startswith("http://") or url.startswith("https://"):
        return url
    if url.startswith("//"):
        return f"https:{url}"
    if url.startswith("/"):
        return f"{base}{url}"
    return f"{base}/{url}"


def _int_attr(value: object) -> int | None:
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def parse_images_from_html(html: str, base_url: str = DEFAULT_FORUM_URL) -> list[ParsedImage]:
    """
    Extract content images from cooked post HTML.

    Bare ``<img>`` tags and images wrapped in lightbox links are both found;
    emoji and tracking pixels are dropped and URLs are made absolute against
    ``base_url``. Duplicates collapse onto the first occurrence.
    """
    if not html:
        return []

    soup = BeautifulSoup(html, "html.parser")
    images: list[ParsedImage] = []
    seen: set[str] = set()
    skipped = 0

    for tag in soup.find_all("img"):
        src = tag.get("src")
        if not isinstance(src, str) or not src.strip():
            continue
        src = src.strip()
        alt = tag.get("alt")
        alt = alt if isinstance(alt, str) else None

        if is_emoji_image(src, alt) or is_tracking_pixel(src):
            skipped += 1
            continue

        url = normalize_image_url(src, base_url)
        if url in seen:
            continue
        seen.add(url)
        images.append(
            ParsedImage(
                url=url,
                alt=alt,
                width=_int_attr(tag.get("width")),
                height=_int_attr(tag.get("height")),
            )
        )

    logger.debug(
        "Parsed images from post HTML",
        extra={"event": "images_parsed", "image_count": len(images), "skipped": skipped},
    )
    return images
