from __future__ import annotations

from pathlib import Path

import pytest

from cofacts_match.core.models import MatchCandidate


@pytest.fixture()
def app_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "home"
    monkeypatch.setenv("COFACTS_MATCH_HOME", str(home))
    monkeypatch.delenv("COFACTS_ENDPOINT", raising=False)
    return home


@pytest.fixture()
def make_candidate():
    def _make(text: str = "", urls: list[str] | None = None, id: str = "a1") -> MatchCandidate:
        return MatchCandidate(id=id, text=text, urls=list(urls or []))

    return _make
