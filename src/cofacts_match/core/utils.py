from __future__ import annotations

import asyncio
import random
import re
from typing import Iterator


_WHITESPACE_TABLE = str.maketrans("", "", "\n\r\t ")

# Scheme is mandatory; bare "example.com" is not treated as a link.
_URL_RE = re.compile(
    r"(?<![A-Za-z0-9])(?:https?|ftp)://[^\s<>'\"`，。、；：！？「」『』（）【】]+",
    flags=re.IGNORECASE,
)
_URL_TRAILING = ".,;:!?'\")]}"


def remove_whitespace(text: str) -> str:
    """Drop newline, carriage return, tab and space characters.

    Other Unicode whitespace (e.g. U+3000) is kept as-is.
    """
    return text.translate(_WHITESPACE_TABLE)


def _trim_url(url: str) -> str:
    while url and url[-1] in _URL_TRAILING:
        # Keep a closing paren that belongs to the URL, e.g. wiki links.
        if url[-1] == ")" and url.count("(") >= url.count(")"):
            break
        url = url[:-1]
    return url


def extract_urls(text: str) -> list[str]:
    urls: list[str] = []
    for m in _URL_RE.finditer(text or ""):
        url = _trim_url(m.group(0))
        if "://" in url and not url.endswith("://"):
            urls.append(url)
    return urls


def chunk_bytes(data: bytes, size: int) -> Iterator[bytes]:
    """Yield consecutive, non-overlapping windows of `size` bytes.

    The last window may be shorter. Empty input yields nothing.
    """
    if size <= 0:
        raise ValueError("chunk size must be positive")
    for start in range(0, len(data), size):
        yield data[start : start + size]


async def async_backoff_sleep(attempt: int, base_seconds: float) -> None:
    delay = base_seconds * (2 ** max(0, attempt - 1))
    delay *= random.uniform(0.85, 1.15)
    await asyncio.sleep(min(delay, 30.0))
