from __future__ import annotations

from typing import Any, Optional

import requests

from soldcomps import get_logger
from soldcomps.config import Settings
from soldcomps.models import Listing, SearchOutcome, iso_now
from soldcomps.pricing import normalize_shipping, parse_price

LOGGER = get_logger()

SERPAPI_ENDPOINT = "https://serpapi.com/search.json"
DEFAULT_CURRENCY = "USD"
DEFAULT_CONDITION = "Unknown"


class FallbackProviderError(RuntimeError):
    pass


class SerpApiClient:
    def __init__(self, settings: Settings, session: Optional[requests.Session] = None) -> None:
        self.settings = settings
        self.session = session or requests.Session()

    def build_params(self, query: str) -> dict[str, Any]:
        flag = "true" if self.settings.fallback_sold_only else "false"
        return {
            "engine": "ebay",
            "ebay_domain": "ebay.com",
            "q": query,
            "sold": flag,
            "completed": flag,
            "_nkw": query,
            "LH_PrefLoc": self.settings.search_pref_loc,
            "api_key": self.settings.serpapi_api_key,
        }

    def search(self, query: str) -> Optional[SearchOutcome]:
        if not self.settings.serpapi_api_key:
            LOGGER.error("SerpAPI key not configured; fallback search skipped.")
            return None
        response = self.session.get(
            SERPAPI_ENDPOINT,
            params=self.build_params(query),
            timeout=self.settings.fallback_timeout_s,
        )
        if response.status_code != 200:
            error = f"SerpAPI ERROR {response.status_code}"
            LOGGER.error(error)
            raise FallbackProviderError(error)
        data = response.json() or {}
        results = data.get("organic_results") or []
        outcome = SearchOutcome(listings=[], raw_count=len(results))
        for item in results:
            if not isinstance(item, dict):
                outcome.reject("malformed_result")
                continue
            listing = _map_result(item, outcome)
            if listing is not None:
                outcome.listings.append(listing)
        LOGGER.info(
            "SerpAPI returned %s results, kept %s for query=%r rejections=%s",
            outcome.raw_count,
            len(outcome.listings),
            query,
            outcome.rejection_counts,
        )
        return outcome


def _map_result(item: dict[str, Any], outcome: SearchOutcome) -> Optional[Listing]:
    title = str(item.get("title") or "")
    item_url = str(item.get("link") or "")
    if not title:
        outcome.reject("missing_title")
        return None
    if not item_url:
        outcome.reject("missing_item_url")
        return None
    parsed = parse_price(_price_text(item.get("price")))
    if parsed is None:
        outcome.reject("unparsed_price")
        return None
    if parsed.value <= 0:
        outcome.reject("non_positive_price")
        return None
    return Listing(
        title=title,
        price=parsed.value,
        currency=parsed.currency or DEFAULT_CURRENCY,
        image_url=str(item.get("thumbnail") or ""),
        item_url=item_url,
        sold_date=item.get("sold_at") or iso_now(),
        shipping=normalize_shipping(item.get("shipping")),
        condition=item.get("condition") or DEFAULT_CONDITION,
    )


def _price_text(price: Any) -> Optional[str]:
    if isinstance(price, str):
        return price
    if not isinstance(price, dict):
        return None
    raw = price.get("raw")
    if isinstance(raw, str) and raw.strip():
        return raw
    # Price ranges come back as {"from": {...}, "to": {...}}; use the lower bound.
    lower = price.get("from")
    if isinstance(lower, dict) and isinstance(lower.get("raw"), str):
        return lower["raw"]
    return None
