from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence

from soldcomps.models import Listing, MarketStats


def quantile(values: Sequence[float], q: float) -> Optional[float]:
    """Linear interpolation between adjacent order statistics (R-7)."""
    if not values:
        return None
    ordered = sorted(values)
    pos = (len(ordered) - 1) * q
    base = math.floor(pos)
    rest = pos - base
    if base + 1 < len(ordered):
        return ordered[base] + rest * (ordered[base + 1] - ordered[base])
    return ordered[base]


def compute_market_stats(listings: Iterable[Listing]) -> MarketStats:
    prices = [listing.price for listing in listings]
    if not prices:
        return MarketStats(count=0)
    return MarketStats(
        count=len(prices),
        p25=quantile(prices, 0.25),
        median=quantile(prices, 0.5),
        p75=quantile(prices, 0.75),
    )
