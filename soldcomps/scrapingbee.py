from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote_plus, urlencode

import requests

from soldcomps import get_logger
from soldcomps.config import Settings
from soldcomps.html_extract import extract_listings
from soldcomps.models import SearchOutcome

LOGGER = get_logger()

SCRAPINGBEE_ENDPOINT = "https://app.scrapingbee.com/api/v1/"
EBAY_SEARCH_URL = "https://www.ebay.com/sch/i.html"
SORT_ENDING_SOONEST = "12"


class ProviderConfigError(RuntimeError):
    pass


def build_search_params(query: str, settings: Settings) -> dict[str, Any]:
    return {
        "_nkw": query,
        "_sop": SORT_ENDING_SOONEST,
        "LH_Active": "1",
        "_ipg": settings.search_page_size,
        "LH_PrefLoc": settings.search_pref_loc,
    }


def build_search_url(query: str, settings: Settings) -> str:
    params = build_search_params(query, settings)
    return f"{EBAY_SEARCH_URL}?{urlencode(params, quote_via=quote_plus)}"


class ScrapingBeeClient:
    def __init__(self, settings: Settings, session: Optional[requests.Session] = None) -> None:
        self.settings = settings
        self.session = session or requests.Session()

    def fetch_html(self, url: str) -> str:
        api_key = self.settings.scrapingbee_api_key
        if not api_key:
            raise ProviderConfigError("ScrapingBee API key not configured (set BEE_KEY).")
        LOGGER.info("Fetching %s via ScrapingBee", url)
        response = self.session.get(
            SCRAPINGBEE_ENDPOINT,
            params={"api_key": api_key, "url": url},
            timeout=self.settings.primary_timeout_s,
        )
        response.raise_for_status()
        LOGGER.info(
            "ScrapingBee response status=%s length=%s",
            response.status_code,
            len(response.text),
        )
        return response.text

    def search(self, query: str) -> SearchOutcome:
        url = build_search_url(query, self.settings)
        html = self.fetch_html(url)
        return extract_listings(html, query)
