from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


def iso_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True, slots=True)
class ParsedPrice:
    value: float
    currency: Optional[str] = None
    symbol: Optional[str] = None


@dataclass(slots=True)
class Listing:
    title: str
    price: float
    currency: Optional[str] = None
    sold_date: Optional[str] = None
    condition: Optional[str] = None
    image_url: Optional[str] = None
    item_url: Optional[str] = None
    shipping: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data = {
            "title": self.title,
            "price": self.price,
            "currency": self.currency,
            "soldDate": self.sold_date,
            "condition": self.condition,
            "imageUrl": self.image_url,
            "itemUrl": self.item_url,
            "shipping": self.shipping,
        }
        return {key: value for key, value in data.items() if value is not None}


@dataclass(slots=True)
class MarketStats:
    count: int
    p25: Optional[float] = None
    median: Optional[float] = None
    p75: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"count": self.count}
        for key in ("p25", "median", "p75"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass(slots=True)
class SearchOutcome:
    listings: list[Listing]
    raw_count: int = 0
    rejection_counts: dict[str, int] = field(default_factory=dict)

    def reject(self, reason: str) -> None:
        self.rejection_counts[reason] = self.rejection_counts.get(reason, 0) + 1
