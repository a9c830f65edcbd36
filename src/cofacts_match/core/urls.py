from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence
from urllib.parse import urlsplit

from multidict import MultiDictProxy
from yarl import URL

from cofacts_match.core.models import MatchCandidate

logger = logging.getLogger(__name__)


class MalformedUrlError(ValueError):
    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Malformed URL {url!r}: {reason}")
        self.url = url


@dataclass(frozen=True)
class _UrlParts:
    host: str
    path: str
    query: MultiDictProxy[str]


def _strip_trailing_slash(path: str) -> str:
    return path[:-1] if path.endswith("/") else path


def _raw_host(url: str) -> str:
    # Host exactly as written, port included, userinfo dropped. Case is kept.
    netloc = urlsplit(url).netloc
    return netloc.rpartition("@")[2]


def parse_url(url: str) -> _UrlParts:
    # yarl validates some components lazily, so every attribute we compare on
    # is read inside the try block.
    try:
        u = URL(url)
        return _UrlParts(
            host=_raw_host(url),
            path=_strip_trailing_slash(u.path),
            query=u.query,
        )
    except (TypeError, ValueError) as e:
        raise MalformedUrlError(str(url), str(e)) from e


def is_equivalent(url_a: str, url_b: str) -> bool:
    """Relaxed URL equality used to pair a shared link with an article link.

    Hosts (case-sensitive, port included) and paths (one trailing slash
    ignored) must be equal, and every query value of `url_a` must also be
    present in `url_b`. Extra query parameters on `url_b` are allowed, so the
    check is directional.
    """
    a = parse_url(url_a)
    b = parse_url(url_b)
    if a.host != b.host:
        return False
    if a.path != b.path:
        return False
    for name in set(a.query.keys()):
        have = set(b.query.getall(name, []))
        for value in a.query.getall(name):
            if value not in have:
                return False
    return True


def exist_in_candidate(candidate: MatchCandidate, query_urls: Sequence[str]) -> bool:
    for candidate_url in candidate.urls:
        for query_url in query_urls:
            try:
                if is_equivalent(query_url, candidate_url):
                    return True
            except MalformedUrlError as e:
                logger.warning("Skipping URL comparison for article %s: %s", candidate.id, e)
    return False
