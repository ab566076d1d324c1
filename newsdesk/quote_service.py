"""Market quotes for a fixed watchlist of indices, large caps, and futures."""
from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional
from urllib.parse import quote as url_quote

from pydantic import BaseModel

from .config import NewsdeskConfig, load_config
from .http_fetch import UpstreamError, get_json

logger = logging.getLogger(__name__)

QUOTE_SYMBOLS = (
    # Major indices
    "^GSPC",
    "^DJI",
    "^IXIC",
    "^FTSE",
    "^N225",
    # Large caps
    "AAPL",
    "MSFT",
    "GOOGL",
    "AMZN",
    "META",
    "NVDA",
    "TSLA",
    "JPM",
    "V",
    "WMT",
    # Commodity futures
    "GC=F",
    "CL=F",
    "SI=F",
    "PL=F",
    "NG=F",
)


class QuoteDataError(ValueError):
    """Raised when a chart payload lacks the price fields needed for a quote."""


class Quote(BaseModel):
    symbol: str
    price: str
    change: str
    changePercent: str
    isPositive: bool


def display_symbol(symbol: str) -> str:
    """Strip index (``^``) and futures (``=F``) notation for presentation."""
    display = symbol[1:] if symbol.startswith("^") else symbol
    if display.endswith("=F"):
        display = display[:-2]
    return display


def _as_price(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    return price if math.isfinite(price) else None


def build_quote(symbol: str, payload: Any) -> Quote:
    """Map a chart response to a ``Quote``; raises ``QuoteDataError`` on missing data."""
    chart = payload.get("chart") if isinstance(payload, dict) else None
    results = chart.get("result") if isinstance(chart, dict) else None
    if not isinstance(results, list) or not results or not isinstance(results[0], dict):
        raise QuoteDataError(f"no chart data for {symbol}")

    result = results[0]
    meta = result.get("meta") if isinstance(result.get("meta"), dict) else {}
    price = _as_price(meta.get("regularMarketPrice", result.get("regularMarketPrice")))
    previous_close = _as_price(
        meta.get("previousClose", result.get("previousClose", meta.get("chartPreviousClose")))
    )
    if price is None or not previous_close:
        raise QuoteDataError(f"missing price fields for {symbol}")

    change = price - previous_close
    change_percent = change / previous_close * 100
    return Quote(
        symbol=display_symbol(symbol),
        price=f"{price:.2f}",
        change=f"{change:.2f}",
        changePercent=f"{change_percent:.2f}",
        isPositive=change >= 0,
    )


def fetch_quote(symbol: str, config: NewsdeskConfig) -> Optional[Quote]:
    try:
        payload = get_json(
            f"{config.quote_api_url}{url_quote(symbol, safe='')}",
            params={"interval": "1d", "range": "1d"},
            timeout=config.http_timeout_seconds,
        )
        return build_quote(symbol, payload)
    except (UpstreamError, QuoteDataError) as exc:
        logger.warning("quote_fetch_failed symbol=%s error=%s", symbol, exc)
        return None
    except Exception:  # pragma: no cover - guard provider schema drift
        logger.exception("quote_fetch_unexpected_error symbol=%s", symbol)
        return None


def fetch_quotes(
    config: Optional[NewsdeskConfig] = None,
    symbols: tuple[str, ...] = QUOTE_SYMBOLS,
) -> list[Quote]:
    """Fetch every symbol concurrently; failed symbols are skipped, order is kept."""
    cfg = config or load_config()
    with ThreadPoolExecutor(max_workers=cfg.quote_max_workers) as executor:
        results = list(executor.map(lambda symbol: fetch_quote(symbol, cfg), symbols))

    quotes = [quote for quote in results if quote is not None]
    logger.info("quote_fetch_done requested=%d returned=%d", len(symbols), len(quotes))
    return quotes


__all__ = [
    "QUOTE_SYMBOLS",
    "Quote",
    "QuoteDataError",
    "build_quote",
    "display_symbol",
    "fetch_quote",
    "fetch_quotes",
]
