"""Pull http(s) links out of free-form shared text."""
from __future__ import annotations

import re
from typing import List, Optional

# ASCII-only so CJK text glued to a link is not swallowed. Host must contain
# a dot; the last character cannot be "." or "," (trailing punctuation).
URL_PATTERN = re.compile(
    r"https?://[\w\-]+(?:\.[\w\-]+)+(?:[\w.,@?^=%&:/~+#\-]*[\w@?^=%&/~+#\-])?",
    re.IGNORECASE | re.ASCII,
)


def extract_urls(text: str) -> List[str]:
    """
    Extract all URLs from text, in order of first appearance.

    Example:
        "look at this https://v.douyin.com/aBcDeFg/ so funny"
        -> ["https://v.douyin.com/aBcDeFg/"]

    Args:
        text: Mixed text (share message, description, several links)

    Returns:
        Deduplicated list of URLs; empty when none are found
    """
    if not text or not text.strip():
        return []

    seen = set()
    urls: List[str] = []
    for match in URL_PATTERN.finditer(text):
        url = match.group(0)
        if url not in seen:
            seen.add(url)
            urls.append(url)
    return urls


def first_url(text: str) -> Optional[str]:
    urls = extract_urls(text)
    return urls[0] if urls else None


def contains_url(text: str) -> bool:
    return bool(extract_urls(text))
