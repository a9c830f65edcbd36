from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


DEFAULT_ENDPOINT = "https://cofacts-api.g0v.tw/graphql"
DEFAULT_MIN_COMMON_BYTES = 25
DEFAULT_MIN_COMMON_PERCENT = 80
DEFAULT_CHUNK_RATIO = 6
DEFAULT_WINDOW_MULTIPLIER = 2


@dataclass(frozen=True)
class MatchSettings:
    # A text match needs more than min_common_bytes in common, or at least
    # min_common_percent of the raw query length.
    min_common_bytes: int = DEFAULT_MIN_COMMON_BYTES
    min_common_percent: int = DEFAULT_MIN_COMMON_PERCENT
    # Chunk the longer input only when it is chunk_ratio times the shorter one.
    chunk_ratio: int = DEFAULT_CHUNK_RATIO
    # Windows narrower than twice the short input can split a common run in
    # both passes.
    window_multiplier: int = DEFAULT_WINDOW_MULTIPLIER

    def __post_init__(self) -> None:
        if self.min_common_bytes < 0:
            raise ValueError(f"min_common_bytes must be >= 0, got {self.min_common_bytes}")
        if self.min_common_percent < 0:
            raise ValueError(f"min_common_percent must be >= 0, got {self.min_common_percent}")
        if self.chunk_ratio < 1:
            raise ValueError(f"chunk_ratio must be >= 1, got {self.chunk_ratio}")
        if self.window_multiplier < 2:
            raise ValueError(f"window_multiplier must be >= 2, got {self.window_multiplier}")


@dataclass(frozen=True)
class SearchSettings:
    endpoint: str = DEFAULT_ENDPOINT
    first: int = 4
    requests_per_second: float = 2.0
    max_retries: int = 2
    backoff_base_seconds: float = 0.5
    timeout_seconds: float = 30.0
    user_agent: str = "cofacts-match/0.1 (+https://cofacts.tw)"


@dataclass(frozen=True)
class AppPaths:
    app_dir: Path
    log_path: Path

    @staticmethod
    def default() -> "AppPaths":
        home = os.environ.get("COFACTS_MATCH_HOME")
        app_dir = Path(home).expanduser() if home else Path.home() / ".cofacts_match"
        return AppPaths(app_dir=app_dir, log_path=app_dir / "cofacts_match.log")

    @property
    def config_path(self) -> Path:
        return self.app_dir / "config.json"


def _merge(base: Any, overrides: Any) -> Any:
    """Return a copy of the dataclass `base` with known keys from `overrides`.

    A value that cannot be converted, or that the dataclass rejects, is logged
    and the default is kept.
    """
    if not isinstance(overrides, dict):
        return base
    known = {f.name for f in fields(base)}
    merged = base
    for key, value in overrides.items():
        if key not in known:
            logger.debug("Ignoring unknown config key: %s", key)
            continue
        current = getattr(base, key)
        try:
            merged = replace(merged, **{key: type(current)(value)})
        except (TypeError, ValueError) as e:
            logger.warning("Invalid config value for %s: %r (%s); keeping %r", key, value, e, current)
    return merged


@dataclass(frozen=True)
class AppConfig:
    paths: AppPaths = field(default_factory=AppPaths.default)
    match: MatchSettings = field(default_factory=MatchSettings)
    search: SearchSettings = field(default_factory=SearchSettings)

    @staticmethod
    def load(path: Path | None = None) -> "AppConfig":
        paths = AppPaths.default()
        cfg_path = path or paths.config_path
        data: dict[str, Any] = {}
        if cfg_path.exists():
            try:
                raw = json.loads(cfg_path.read_text(encoding="utf-8"))
                data = raw if isinstance(raw, dict) else {}
            except (OSError, json.JSONDecodeError) as e:
                logger.warning("Could not read config %s: %s", cfg_path, e)

        match = _merge(MatchSettings(), data.get("match"))
        search = _merge(SearchSettings(), data.get("search"))

        endpoint = os.environ.get("COFACTS_ENDPOINT", "").strip()
        if endpoint:
            search = replace(search, endpoint=endpoint)

        paths.app_dir.mkdir(parents=True, exist_ok=True)
        return AppConfig(paths=paths, match=match, search=search)

    def save(self, path: Path | None = None) -> None:
        cfg_path = path or self.paths.config_path
        cfg_path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"match": asdict(self.match), "search": asdict(self.search)}
        cfg_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
