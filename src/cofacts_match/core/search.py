from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import aiohttp
from aiolimiter import AsyncLimiter

from cofacts_match.core.config import AppConfig, SearchSettings
from cofacts_match.core.matching import annotate_matches
from cofacts_match.core.models import ArticleReply, MatchCandidate
from cofacts_match.core.utils import async_backoff_sleep

logger = logging.getLogger(__name__)


COFACTS_GQL_QUERY = """
query($text: String, $first: Int) {
  ListArticles(
    filter: { moreLikeThis: { like: $text } }
    orderBy: [{ _score: DESC }]
    first: $first
  ) {
    edges {
      node {
        id
        text
        hyperlinks {
          url
        }
        articleReplies {
          reply {
            id
            text
            type
            reference
          }
        }
      }
    }
  }
}
"""


class SearchError(RuntimeError):
    pass


def _str(value: Any) -> str:
    return "" if value is None else str(value)


def parse_search_response(payload: Any) -> list[MatchCandidate]:
    if not isinstance(payload, dict):
        raise SearchError("Search response is not a JSON object")
    errors = payload.get("errors")
    if errors:
        messages = [e.get("message", str(e)) if isinstance(e, dict) else str(e) for e in errors]
        raise SearchError("GraphQL errors: " + "; ".join(messages))

    articles = ((payload.get("data") or {}).get("ListArticles") or {}).get("edges") or []
    candidates: list[MatchCandidate] = []
    for edge in articles:
        node = (edge or {}).get("node") or {}
        urls = [_str(h.get("url")) for h in node.get("hyperlinks") or [] if h and h.get("url")]
        replies = []
        for ar in node.get("articleReplies") or []:
            reply = (ar or {}).get("reply") or {}
            if not reply:
                continue
            replies.append(
                ArticleReply(
                    id=_str(reply.get("id")),
                    text=_str(reply.get("text")),
                    type=_str(reply.get("type")),
                    reference=_str(reply.get("reference")),
                )
            )
        candidates.append(MatchCandidate(id=_str(node.get("id")), text=_str(node.get("text")), urls=urls, replies=replies))
    return candidates


def render_response(candidates: list[MatchCandidate]) -> dict[str, Any]:
    return {"data": {"ListArticles": {"edges": [{"node": c.to_dict()} for c in candidates]}}}


class CofactsClient:
    def __init__(self, *, settings: SearchSettings, session: aiohttp.ClientSession) -> None:
        self._settings = settings
        self._session = session
        # aiolimiter acquires 1 token per request; below 1 rps stretch the period instead.
        rps = max(0.1, float(settings.requests_per_second))
        if rps >= 1.0:
            self._limiter = AsyncLimiter(max_rate=rps, time_period=1.0)
        else:
            self._limiter = AsyncLimiter(max_rate=1.0, time_period=1.0 / rps)

    async def search(self, text: str) -> list[MatchCandidate]:
        body = {
            "query": COFACTS_GQL_QUERY,
            "variables": {"text": text, "first": self._settings.first},
        }
        attempts = 0
        last_exc: Exception | None = None

        while attempts <= self._settings.max_retries:
            try:
                async with self._limiter:
                    payload = await self._post_once(body)
                return parse_search_response(payload)
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_exc = e
                attempts += 1
                logger.warning("Search request failed (attempt %d): %s", attempts, e)
                if attempts > self._settings.max_retries:
                    break
                await async_backoff_sleep(attempts, self._settings.backoff_base_seconds)

        assert last_exc is not None
        raise SearchError(f"Search failed after {attempts} attempt(s): {last_exc}") from last_exc

    async def _post_once(self, body: dict[str, Any]) -> Any:
        headers = {
            "User-Agent": self._settings.user_agent,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        timeout = aiohttp.ClientTimeout(total=self._settings.timeout_seconds)
        async with self._session.post(self._settings.endpoint, json=body, headers=headers, timeout=timeout) as resp:
            raw = await resp.text()
            if resp.status >= 500:
                # Server side hiccups are retried like transport errors.
                raise aiohttp.ClientResponseError(
                    resp.request_info, resp.history, status=resp.status, message=raw[:200]
                )
            if resp.status >= 400:
                raise SearchError(f"HTTP {resp.status}: {raw[:200]}")
            try:
                return json.loads(raw)
            except json.JSONDecodeError as e:
                raise SearchError(f"Invalid JSON from search service: {e}") from e


async def search_and_match(
    text: str,
    *,
    config: AppConfig,
    session: aiohttp.ClientSession,
) -> list[MatchCandidate]:
    client = CofactsClient(settings=config.search, session=session)
    candidates = await client.search(text)
    logger.info("Search returned %d article(s)", len(candidates))
    return annotate_matches(text, candidates, settings=config.match)
