from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_CACHE_TTL_MINUTES = 60
DEFAULT_CACHE_MAX_ENTRIES = 1
DEFAULT_MIN_PRIMARY_LISTINGS = 3
DEFAULT_SEARCH_PAGE_SIZE = 240
DEFAULT_SEARCH_PREF_LOC = "3"

# ScrapingBee renders the page in a headless browser, so it gets the longer deadline.
DEFAULT_PRIMARY_TIMEOUT_S = 60.0
DEFAULT_FALLBACK_TIMEOUT_S = 20.0


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_key(*names: str) -> Optional[str]:
    for name in names:
        value = os.getenv(name)
        if value and value.strip():
            return value.strip()
    return None


def load_dotenv(path: str | Path = ".env") -> list[str]:
    """Load KEY=VALUE pairs from a .env file into ``os.environ``.

    Blank lines and ``#`` comments are skipped, an ``export`` prefix is allowed
    and values may be wrapped in single or double quotes. Variables already in
    the environment win. Returns the names that were set.
    """
    p = Path(path)
    if not p.is_file():
        return []
    try:
        raw = p.read_text(encoding="utf-8")
    except OSError:
        return []

    loaded: list[str] = []
    for line in raw.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        if stripped.startswith("export "):
            stripped = stripped[len("export "):].lstrip()
        key, value = stripped.split("=", 1)
        key = key.strip()
        if not key or key in os.environ:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
            value = value[1:-1]
        os.environ[key] = value
        loaded.append(key)
    return loaded


@dataclass(slots=True)
class Settings:
    scrapingbee_api_key: Optional[str] = None
    serpapi_api_key: Optional[str] = None
    cache_ttl_minutes: int = DEFAULT_CACHE_TTL_MINUTES
    cache_max_entries: int = DEFAULT_CACHE_MAX_ENTRIES
    min_primary_listings: int = DEFAULT_MIN_PRIMARY_LISTINGS
    search_page_size: int = DEFAULT_SEARCH_PAGE_SIZE
    search_pref_loc: str = DEFAULT_SEARCH_PREF_LOC
    primary_timeout_s: float = DEFAULT_PRIMARY_TIMEOUT_S
    fallback_timeout_s: float = DEFAULT_FALLBACK_TIMEOUT_S
    fallback_sold_only: bool = False

    @property
    def cache_ttl_seconds(self) -> float:
        return self.cache_ttl_minutes * 60.0

    @classmethod
    def from_env(cls, **overrides: object) -> "Settings":
        kwargs: dict[str, object] = {
            "scrapingbee_api_key": _env_key("BEE_KEY", "SCRAPINGBEE_API_KEY"),
            "serpapi_api_key": _env_key("SERP_KEY", "SERPAPI_API_KEY"),
            "cache_ttl_minutes": max(
                0, int(os.getenv("CACHE_TTL_MINUTES", str(DEFAULT_CACHE_TTL_MINUTES)))
            ),
            "cache_max_entries": max(
                1, int(os.getenv("CACHE_MAX_ENTRIES", str(DEFAULT_CACHE_MAX_ENTRIES)))
            ),
            "min_primary_listings": max(
                0, int(os.getenv("MIN_PRIMARY_LISTINGS", str(DEFAULT_MIN_PRIMARY_LISTINGS)))
            ),
            "search_page_size": int(os.getenv("SEARCH_PAGE_SIZE", str(DEFAULT_SEARCH_PAGE_SIZE))),
            "search_pref_loc": os.getenv("SEARCH_PREF_LOC", DEFAULT_SEARCH_PREF_LOC).strip()
            or DEFAULT_SEARCH_PREF_LOC,
            "primary_timeout_s": float(
                os.getenv("PRIMARY_TIMEOUT_S", str(DEFAULT_PRIMARY_TIMEOUT_S))
            ),
            "fallback_timeout_s": float(
                os.getenv("FALLBACK_TIMEOUT_S", str(DEFAULT_FALLBACK_TIMEOUT_S))
            ),
            "fallback_sold_only": _env_bool("FALLBACK_SOLD_ONLY", False),
        }
        kwargs.update(overrides)
        return cls(**kwargs)
