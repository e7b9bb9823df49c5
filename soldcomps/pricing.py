from __future__ import annotations

import re
from typing import Any, Mapping, Optional, Union

from soldcomps.models import ParsedPrice

UNKNOWN_SHIPPING = "Unknown"

# Longer tokens first so "US $" wins over "$".
CURRENCY_SYMBOLS: list[tuple[str, str]] = [
    ("US $", "USD"),
    ("AU $", "AUD"),
    ("C $", "CAD"),
    ("£", "GBP"),
    ("€", "EUR"),
    ("¥", "JPY"),
    ("$", "USD"),
]
CURRENCY_CODE_RE = re.compile(r"\b(USD|GBP|EUR|CAD|AUD|JPY|CHF|SEK|NOK|DKK)\b")
AMOUNT_RE = re.compile(r"\d{1,3}(?:[ ,.\u00a0]\d{3})+(?:[.,]\d+)?|\d+(?:[.,]\d+)?")
SHIPPING_PHRASE_RE = re.compile(r"\b(delivery|shipping|postage)\b", re.IGNORECASE)

ShippingInput = Union[str, Mapping[str, Any], None]


def parse_price(text: Optional[str]) -> Optional[ParsedPrice]:
    """Parse a display price such as ``"US $1,299.95"`` or ``"1.299,95 €"``.

    Returns ``None`` when the text is blank or holds no amount. For ranges the
    first amount is used.
    """
    if text is None or not text.strip():
        return None
    currency, symbol = _detect_currency(text)
    match = AMOUNT_RE.search(text)
    if not match:
        return None
    value = _amount_to_float(match.group(0))
    if value is None:
        return None
    return ParsedPrice(value=value, currency=currency, symbol=symbol)


def normalize_shipping(shipping: ShippingInput) -> str:
    if isinstance(shipping, Mapping):
        extracted = shipping.get("extracted")
        if isinstance(extracted, (int, float)) and not isinstance(extracted, bool):
            return format_amount(extracted)
        raw = shipping.get("raw")
        shipping = raw if isinstance(raw, str) else None
    if not shipping:
        return "0"

    lowered = shipping.lower()
    if "free" in lowered:
        return "0"
    if "bids" in lowered:
        return UNKNOWN_SHIPPING
    if SHIPPING_PHRASE_RE.search(shipping):
        cleaned = SHIPPING_PHRASE_RE.sub("", shipping).replace("+", "").strip()
        parsed = parse_price(cleaned)
        if parsed is not None:
            return format_amount(parsed.value)
    return "0"


def is_shipping_text(text: Optional[str]) -> bool:
    """True when an attributes row describes shipping or bidding."""
    if not text:
        return False
    return bool(SHIPPING_PHRASE_RE.search(text)) or "bids" in text.lower()


def format_amount(value: float) -> str:
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return str(value)


def _detect_currency(text: str) -> tuple[Optional[str], Optional[str]]:
    for symbol, code in CURRENCY_SYMBOLS:
        if symbol in text:
            return code, symbol
    code_match = CURRENCY_CODE_RE.search(text.upper())
    if code_match:
        return code_match.group(1), None
    return None, None


def _amount_to_float(raw: str) -> Optional[float]:
    cleaned = raw.replace(" ", "").replace("\u00a0", "")
    if "." in cleaned and "," in cleaned:
        decimal_sep = "." if cleaned.rfind(".") > cleaned.rfind(",") else ","
        thousands_sep = "," if decimal_sep == "." else "."
        cleaned = cleaned.replace(thousands_sep, "").replace(decimal_sep, ".")
    else:
        for sep in (",", "."):
            if sep not in cleaned:
                continue
            head, _, tail = cleaned.rpartition(sep)
            # "0.999" is a decimal; a leading zero never opens a thousands group.
            if cleaned.count(sep) > 1 or (len(tail) == 3 and head not in {"", "0"}):
                cleaned = cleaned.replace(sep, "")
            else:
                cleaned = f"{head}.{tail}"
    try:
        return float(cleaned)
    except ValueError:
        return None
