"""Keyword-based topical tagging for headlines."""
from __future__ import annotations

from types import MappingProxyType

THEMES = MappingProxyType(
    {
        "Markets": ("market", "trading", "stock", "shares", "index"),
        "Stocks": ("stock", "shares", "equity", "nasdaq", "dow", "s&p"),
        "Bonds": ("bond", "treasury", "yield", "debt"),
        "Commodities": ("oil", "gold", "commodity", "commodities", "metals"),
        "Currencies": ("forex", "currency", "dollar", "euro", "yen"),
        "Crypto": ("crypto", "bitcoin", "ethereum", "blockchain"),
        "Economy": ("economy", "gdp", "inflation", "fed", "economic"),
        "Banking": ("bank", "banking", "citi", "jpmorgan", "goldman"),
    }
)


def classify_title(title: str | None) -> list[str]:
    """Return every theme whose keywords appear in the title, in declaration order."""
    text = (title or "").lower()
    if not text:
        return []
    return [theme for theme, words in THEMES.items() if any(word in text for word in words)]


__all__ = ["THEMES", "classify_title"]
