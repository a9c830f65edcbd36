from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

import aiohttp

from cofacts_match.core.config import AppConfig
from cofacts_match.core.logging_config import configure_logging
from cofacts_match.core.models import MatchCandidate
from cofacts_match.core.search import SearchError, render_response, search_and_match

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="cofacts-match",
        description="Search Cofacts for a message and flag the articles that really match it.",
    )
    p.add_argument("text", nargs="?", default="-", help="Message text, or '-' to read stdin.")
    p.add_argument("--only-matches", action="store_true", help="Drop articles that do not match.")
    p.add_argument("--config", type=Path, default=None, help="Path to a config.json file.")
    p.add_argument("--verbose", action="store_true", help="Log per-article match details.")
    return p


async def _run(text: str, config: AppConfig) -> list[MatchCandidate]:
    async with aiohttp.ClientSession() as session:
        return await search_and_match(text, config=config, session=session)


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    config = AppConfig.load(args.config)
    configure_logging(config, verbose=args.verbose)

    text = sys.stdin.read() if args.text == "-" else args.text
    if not text.strip():
        logger.error("Nothing to search for: query text is empty")
        return 1

    try:
        candidates = asyncio.run(_run(text, config))
    except SearchError as e:
        logger.error("%s", e)
        return 2

    if args.only_matches:
        candidates = [c for c in candidates if c.is_match]
    print(json.dumps(render_response(candidates), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
