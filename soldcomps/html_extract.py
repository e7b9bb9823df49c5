from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from bs4 import BeautifulSoup

from soldcomps import get_logger
from soldcomps.models import Listing, SearchOutcome
from soldcomps.pricing import is_shipping_text, normalize_shipping, parse_price

LOGGER = get_logger()

CARD_SELECTOR = ".su-card-container"
PLACEHOLDER_TITLE = "Shop on eBay"
CONDITION_DECORATIONS = (" Â· ", " · ", "Â·", "·")


@dataclass(frozen=True, slots=True)
class CardField:
    name: str
    selectors: tuple[str, ...]
    required: bool = False
    attributes: tuple[str, ...] = ()


CARD_SCHEMA: tuple[CardField, ...] = (
    CardField("title", (".s-card__title .primary", ".s-card__title"), required=True),
    CardField("price", (".s-card__price",), required=True),
    CardField("condition", (".s-card__subtitle span",), required=True),
    CardField("item_url", ("a.su-link[href]", "a[href*='/itm/']"), attributes=("href",)),
    CardField("image_url", ("img[src]", "img[data-src]"), attributes=("src", "data-src")),
)


def extract_listings(html: str, query: str) -> SearchOutcome:
    soup = BeautifulSoup(html, "lxml")
    cards = soup.select(CARD_SELECTOR)
    outcome = SearchOutcome(listings=[], raw_count=len(cards))
    for index, card in enumerate(cards):
        listing = _card_to_listing(card, index, outcome)
        if listing is not None:
            outcome.listings.append(listing)
    LOGGER.info(
        "Extracted %s listings from %s cards for query=%r rejections=%s",
        len(outcome.listings),
        outcome.raw_count,
        query,
        outcome.rejection_counts,
    )
    return outcome


def read_card(card: Any) -> dict[str, Optional[str]]:
    return {spec.name: _read_field(card, spec) for spec in CARD_SCHEMA}


def _card_to_listing(card: Any, index: int, outcome: SearchOutcome) -> Optional[Listing]:
    values = read_card(card)
    for spec in CARD_SCHEMA:
        if spec.required and not values[spec.name]:
            LOGGER.debug("Card %s rejected: missing %s", index, spec.name)
            outcome.reject(f"missing_{spec.name}")
            return None
    title = values["title"] or ""
    if title == PLACEHOLDER_TITLE:
        outcome.reject("placeholder_title")
        return None
    parsed = parse_price(values["price"])
    if parsed is None:
        LOGGER.debug("Card %s rejected: unparsed price %r", index, values["price"])
        outcome.reject("unparsed_price")
        return None
    condition = _clean_condition(values["condition"] or "")
    if not condition:
        outcome.reject("missing_condition")
        return None

    shipping_text = _extract_shipping_text(card)
    return Listing(
        title=title,
        price=parsed.value,
        condition=condition,
        item_url=values["item_url"],
        image_url=values["image_url"],
        shipping=normalize_shipping(shipping_text) if is_shipping_text(shipping_text) else None,
    )


def _read_field(card: Any, spec: CardField) -> Optional[str]:
    for selector in spec.selectors:
        el = card.select_one(selector)
        if el is None:
            continue
        if spec.attributes:
            for attr in spec.attributes:
                value = el.get(attr)
                if value:
                    return str(value).strip()
            continue
        # The first matching element decides; an empty label is a missing field.
        return _element_text(el) or None
    return None


def _extract_shipping_text(card: Any) -> Optional[str]:
    # Shipping, when present, is the third row of the primary attributes block.
    block = card.select_one(".su-card-container__attributes__primary")
    if block is None:
        return None
    rows = block.find_all(recursive=False)
    if len(rows) < 3:
        return None
    return _element_text(rows[2]) or None


def _element_text(el: Any) -> str:
    return " ".join(el.get_text().split())


def _clean_condition(text: str) -> str:
    for decoration in CONDITION_DECORATIONS:
        text = text.replace(decoration, "")
    return text.strip()
