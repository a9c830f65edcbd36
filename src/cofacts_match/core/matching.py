from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from cofacts_match.core.config import MatchSettings
from cofacts_match.core.lcss import lcss_chunked
from cofacts_match.core.models import MatchCandidate
from cofacts_match.core.urls import exist_in_candidate
from cofacts_match.core.utils import extract_urls, remove_whitespace

logger = logging.getLogger(__name__)


class EmptyQueryError(ValueError):
    def __init__(self) -> None:
        super().__init__("Query text is empty; cannot compute text overlap ratio")


@dataclass(frozen=True)
class MatchDecision:
    is_match: bool
    method: str
    common_length: int = 0
    common_percent: int = 0
    common: bytes = b""


def decide(
    query_text: str,
    candidate: MatchCandidate,
    query_urls: Sequence[str],
    *,
    settings: MatchSettings | None = None,
) -> MatchDecision:
    """Decide whether `candidate` matches the query.

    When the query carries links, at least one of them must be equivalent to a
    link attached to the article and the text is not looked at. Otherwise the
    whitespace-stripped texts must share more than `min_common_bytes` bytes,
    or at least `min_common_percent` of the raw query length.
    """
    settings = settings or MatchSettings()
    if query_urls:
        return MatchDecision(is_match=exist_in_candidate(candidate, query_urls), method="url")

    raw_query = query_text.encode("utf-8")
    if not raw_query:
        raise EmptyQueryError()

    common = lcss_chunked(
        remove_whitespace(query_text).encode("utf-8"),
        remove_whitespace(candidate.text or "").encode("utf-8"),
        settings=settings,
    )
    # Ratio is taken against the query before whitespace removal.
    percent = len(common) * 100 // len(raw_query)
    ok = len(common) > settings.min_common_bytes or percent >= settings.min_common_percent
    return MatchDecision(
        is_match=ok,
        method="text",
        common_length=len(common),
        common_percent=percent,
        common=common,
    )


def explain(
    query_text: str,
    candidate: MatchCandidate,
    *,
    settings: MatchSettings | None = None,
) -> tuple[MatchDecision, str]:
    decision = decide(query_text, candidate, extract_urls(query_text), settings=settings)
    return decision, decision.common.decode("utf-8", errors="replace")


def annotate_matches(
    query_text: str,
    candidates: Sequence[MatchCandidate],
    *,
    settings: MatchSettings | None = None,
) -> list[MatchCandidate]:
    settings = settings or MatchSettings()
    query_urls = extract_urls(query_text)
    if query_urls:
        logger.debug("Query contains %d URL(s); matching on links only", len(query_urls))

    for candidate in candidates:
        try:
            decision = decide(query_text, candidate, query_urls, settings=settings)
        except EmptyQueryError:
            logger.info("Empty query; marking %d article(s) as non-matching", len(candidates))
            for c in candidates:
                c.is_match = False
            break
        candidate.is_match = decision.is_match
        logger.debug(
            "Article %s: match=%s method=%s common=%d (%d%%)",
            candidate.id,
            decision.is_match,
            decision.method,
            decision.common_length,
            decision.common_percent,
        )
    return list(candidates)
