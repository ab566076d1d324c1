"""Environment-driven settings for the news and market-quote service."""
from __future__ import annotations

import os
from dataclasses import dataclass

NEWSAPI_URL = "https://newsapi.org/v2/top-headlines"
NEWSDATA_URL = "https://newsdata.io/api/1/news"
YAHOO_CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart/"
HUGGINGFACE_SUMMARY_URL = "https://api-inference.huggingface.co/models/facebook/bart-large-cnn"

NEWS_PROVIDERS = {"newsapi", "newsdata"}


@dataclass(frozen=True)
class NewsdeskConfig:
    news_provider: str
    news_api_key: str
    news_api_url: str
    news_country: str
    news_page_size: int
    quote_api_url: str
    quote_max_workers: int
    summary_api_key: str
    summary_api_url: str
    summary_article_limit: int
    http_timeout_seconds: float


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def load_config() -> NewsdeskConfig:
    provider = os.getenv("NEWS_PROVIDER", "newsapi").strip().lower()
    if provider not in NEWS_PROVIDERS:
        provider = "newsapi"

    default_url = NEWSDATA_URL if provider == "newsdata" else NEWSAPI_URL
    default_page_size = 10 if provider == "newsdata" else 100
    page_size = _int_env("NEWS_PAGE_SIZE", default_page_size)

    quote_url = os.getenv("QUOTE_API_URL", "").strip() or YAHOO_CHART_URL
    if not quote_url.endswith("/"):
        quote_url += "/"

    return NewsdeskConfig(
        news_provider=provider,
        news_api_key=os.getenv("NEWS_API_KEY", "").strip(),
        news_api_url=os.getenv("NEWS_API_URL", "").strip() or default_url,
        news_country=os.getenv("NEWS_COUNTRY", "us").strip() or "us",
        news_page_size=max(1, min(page_size, 100)),
        quote_api_url=quote_url,
        quote_max_workers=max(1, min(_int_env("QUOTE_MAX_WORKERS", 8), 32)),
        summary_api_key=os.getenv("HUGGINGFACE_API_KEY", "").strip(),
        summary_api_url=os.getenv("HUGGINGFACE_API_URL", "").strip() or HUGGINGFACE_SUMMARY_URL,
        summary_article_limit=max(1, min(_int_env("SUMMARY_ARTICLE_LIMIT", 20), 100)),
        http_timeout_seconds=max(1.0, _float_env("HTTP_TIMEOUT_SEC", 10.0)),
    )


__all__ = [
    "HUGGINGFACE_SUMMARY_URL",
    "NEWSAPI_URL",
    "NEWSDATA_URL",
    "NewsdeskConfig",
    "YAHOO_CHART_URL",
    "load_config",
]
