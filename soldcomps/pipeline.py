from __future__ import annotations

from typing import Any, Optional, Protocol

from soldcomps import get_logger
from soldcomps.cache import ResultCache
from soldcomps.config import Settings
from soldcomps.models import Listing, SearchOutcome
from soldcomps.scrapingbee import ScrapingBeeClient
from soldcomps.serpapi import SerpApiClient
from soldcomps.stats import compute_market_stats

LOGGER = get_logger()

SOURCE_PRIMARY = "primary"
SOURCE_FALLBACK = "fallback"


class InvalidQueryError(ValueError):
    pass


class PrimaryProvider(Protocol):
    def search(self, query: str) -> SearchOutcome:
        ...


class FallbackProvider(Protocol):
    def search(self, query: str) -> Optional[SearchOutcome]:
        ...


class SoldCompsService:
    def __init__(
        self,
        settings: Settings,
        *,
        primary: Optional[PrimaryProvider] = None,
        fallback: Optional[FallbackProvider] = None,
        cache: Optional[ResultCache] = None,
    ) -> None:
        self.settings = settings
        self.primary = primary or ScrapingBeeClient(settings)
        self.fallback = fallback or SerpApiClient(settings)
        self.cache = cache or ResultCache(
            settings.cache_ttl_seconds,
            max_entries=settings.cache_max_entries,
        )

    def lookup(self, query: Optional[str]) -> dict[str, Any]:
        """Return ``{query, items, stats, source, cached}`` for a search query.

        Raises ``InvalidQueryError`` for a missing or blank query. Provider
        failures propagate and leave the cache untouched.
        """
        if query is None or not query.strip():
            raise InvalidQueryError("Missing query parameter q")

        cached = self.cache.get(query)
        if cached is not None:
            LOGGER.info("Returning cached data for query=%r", query)
            cached["cached"] = True
            return cached

        listings, source = self._collect_listings(query)
        stats = compute_market_stats(listings)
        payload = {
            "query": query,
            "stats": stats.to_dict(),
            "items": [listing.to_dict() for listing in listings],
            "source": source,
            "cached": True,
        }
        self.cache.set(query, payload)
        LOGGER.info(
            "Computed stats for query=%r source=%s count=%s median=%s",
            query,
            source,
            stats.count,
            stats.median,
        )
        return {**payload, "cached": False}

    def _collect_listings(self, query: str) -> tuple[list[Listing], str]:
        primary = self.primary.search(query)
        if len(primary.listings) >= self.settings.min_primary_listings:
            return primary.listings, SOURCE_PRIMARY
        LOGGER.warning(
            "Primary search returned %s listings (< %s) for query=%r; using fallback.",
            len(primary.listings),
            self.settings.min_primary_listings,
            query,
        )
        fallback = self.fallback.search(query)
        listings = fallback.listings if fallback is not None else []
        return listings, SOURCE_FALLBACK
