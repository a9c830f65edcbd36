from __future__ import annotations

import sys
from pathlib import Path

from cofacts_match.core.config import AppConfig
from cofacts_match.core.matching import explain
from cofacts_match.core.models import MatchCandidate
from cofacts_match.core.utils import extract_urls


def main() -> None:
    if len(sys.argv) < 3:
        print("usage: match_inspect.py QUERY_FILE ARTICLE_FILE [ARTICLE_URL ...]")
        raise SystemExit(2)

    cfg = AppConfig.load()
    query = Path(sys.argv[1]).read_text(encoding="utf-8")
    article = Path(sys.argv[2]).read_text(encoding="utf-8")
    candidate = MatchCandidate(id=Path(sys.argv[2]).name, text=article, urls=sys.argv[3:])

    print("settings:", cfg.match)
    print("query bytes:", len(query.encode("utf-8")))
    print("article bytes:", len(article.encode("utf-8")))
    print("query urls:", extract_urls(query))

    decision, common = explain(query, candidate, settings=cfg.match)
    print("method:", decision.method)
    print("match:", decision.is_match)
    if decision.method == "text":
        print("common bytes:", decision.common_length)
        print("common percent:", decision.common_percent)
        print("common:", common)


if __name__ == "__main__":
    main()
