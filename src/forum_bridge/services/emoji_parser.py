import re

EMOTICON_MAP: dict[str, str] = {
    ":)": "\U0001F60A",
    ":-)": "\U0001F60A",
    ":(": "\U0001F622",
    ":-(": "\U0001F622",
    ":D": "\U0001F604",
    ":-D": "\U0001F604",
    ":P": "\U0001F61B",
    ":-P": "\U0001F61B",
    ":p": "\U0001F61B",
    ":-p": "\U0001F61B",
    ":O": "\U0001F62E",
    ":-O": "\U0001F62E",
    ":o": "\U0001F62E",
    ":-o": "\U0001F62E",
    ";)": "\U0001F609",
    ";-)": "\U0001F609",
    ":*": "\U0001F618",
    ":-*": "\U0001F618",
    ":/": "\U0001F615",
    ":-/": "\U0001F615",
    ":@": "\U0001F620",
    ":-@": "\U0001F620",
    ":X": "\U0001F910",
    ":-X": "\U0001F910",
    ":x": "\U0001F910",
    ":-x": "\U0001F910",
    ":$": "\U0001F633",
    ":-$": "\U0001F633",
    ":!": "\U0001F632",
    ":-!": "\U0001F632",
    ":?": "\U0001F914",
    ":-?": "\U0001F914",
    ":L": "\U0001F612",
    ":-L": "\U0001F612",
    ":l": "\U0001F612",
    ":-l": "\U0001F612",
    ":>": "\U0001F60F",
    ":->": "\U0001F60F",
    ":<": "\U0001F612",
    ":-<": "\U0001F612",
    ":^)": "\U0001F60A",
    ":^(": "\U0001F622",
    ":^^": "\U0001F604",
    ":&": "\U0001F922",
    ":-&": "\U0001F922",
}

# Longest first, so ":-)" is consumed whole before ":)" gets a chance.
_EMOTICONS = sorted(EMOTICON_MAP, key=len, reverse=True)

# An emoticon must stand on its own: no word character or URL punctuation
# glued to either side (keeps "http://" and "10:30" intact).
_EMOTICON_RE = re.compile(
    r"(?<!\S)(" + "|".join(re.escape(emoticon) for emoticon in _EMOTICONS) + r")(?=$|\s|[.,!?])"
)

GIF_PATTERNS = (
    re.compile(r"!\[.*?\]\((.*?\.gif)\)", re.IGNORECASE),
    re.compile(r"""<img[^>]+src=["'](.*?\.gif)["'][^>]*>""", re.IGNORECASE),
    re.compile(r"(https?://[^\s\"'<>()]+?\.gif)(?![\w])", re.IGNORECASE),
)

EMOJI_PICKER_DATA: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "Smileys",
        ("😀", "😃", "😄", "😁", "😆", "😅", "🤣", "😂", "🙂", "🙃", "😉", "😊", "😇", "🥰", "😍",
         "🤩", "😘", "😗", "😚", "😙", "🥲", "😋", "😛", "😜", "🤪", "😌", "😔", "😑", "😐", "😏",
         "😒", "🙁", "😕", "😲", "😞", "😖", "😢", "😭", "😤", "😠", "😡", "🤬", "😈", "👿", "💀",
         "☠️", "💩", "🤡", "👹", "👺", "👻", "👽", "👾", "🤖", "😺", "😸", "😹", "😻", "😼",
         "😽", "🙀", "😿", "😾"),
    ),
    (
        "Gestures",
        ("👋", "🤚", "\U0001F590\ufe0f", "✋", "🖖", "👌", "🤌", "🤏", "✌️", "🤞", "🫰", "🤟",
         "🤘", "🤙", "👍", "👎", "✊", "👊", "🤛", "🤜", "👏", "🙌", "👐", "🤲", "🤝", "🦾", "🦿", "👂",
         "👃", "🧠", "🦷", "🦴", "🫀", "🫁"),
    ),
    (
        "Hearts",
        ("❤️", "🧡", "💛", "💚", "💙", "💜", "🖤", "🤍", "🤎", "💔", "💕", "💞", "💓", "💗",
         "💖", "💘", "💝", "💟", "💌", "💢", "💥", "💫", "💦", "💨", "\U0001F573\ufe0f", "💬",
         "\U0001F441\ufe0f\u200d\U0001F5E8\ufe0f", "\U0001F5E8\ufe0f", "\U0001F5EF\ufe0f", "💭", "💤"),
    ),
    (
        "Popular",
        ("😂", "❤️", "😍", "🤔", "👍", "😊", "🎉", "😘", "💕", "😭", "😱", "😍", "🔥", "💯",
         "✨", "🙌", "😎", "🤣", "💪", "😜"),
    ),
)

POPULAR_GIF_SEARCHES = (
    "funny",
    "cute",
    "happy",
    "sad",
    "love",
    "dance",
    "cat",
    "dog",
    "reaction",
    "fail",
    "win",
    "excited",
    "confused",
    "angry",
    "tired",
    "sleep",
    "eating",
    "running",
    "jumping",
    "celebration",
)


def convert_emoticon_to_emoji(text: str) -> str:
    if not text:
        return text or ""
    return _EMOTICON_RE.sub(lambda match: EMOTICON_MAP[match.group(1)], text)


def extract_gif_urls(content: str) -> list[str]:
    gifs: list[str] = []
    if not content:
        return gifs

    for pattern in GIF_PATTERNS:
        for match in pattern.finditer(content):
            url = match.group(1)
            if url and url not in gifs:
                gifs.append(url)
    return gifs


def is_gif_url(url: str) -> bool:
    return bool(re.search(r"\.gif$", url or "", re.IGNORECASE))


def get_emoji_picker_data() -> list[dict[str, object]]:
    return [{"category": category, "emoji": list(emoji)} for category, emoji in EMOJI_PICKER_DATA]


def get_popular_gif_searches() -> list[str]:
    return list(POPULAR_GIF_SEARCHES)
