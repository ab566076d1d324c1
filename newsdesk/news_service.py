"""Business headline aggregation: fetch, freshness filter, and theme enrichment."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field

from .config import NewsdeskConfig, load_config
from .http_fetch import UpstreamError, get_json
from .themes import classify_title
from .time_format import format_time_ago, parse_timestamp, utcnow

logger = logging.getLogger(__name__)

FRESHNESS_WINDOW = timedelta(hours=24)
ALL = "All"


class Article(BaseModel):
    title: str
    link: str
    source: str = ""
    themes: list[str] = Field(default_factory=list)
    pubDate: str = ""
    timeAgo: str = ""
    description: Optional[str] = None
    imageUrl: Optional[str] = None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _optional_text(value: Any) -> Optional[str]:
    text = _text(value)
    return text or None


def _request_newsapi(config: NewsdeskConfig) -> list[dict[str, Any]]:
    data = get_json(
        config.news_api_url,
        params={
            "apiKey": config.news_api_key,
            "country": config.news_country,
            "category": "business",
            "language": "en",
            "pageSize": str(config.news_page_size),
            "sortBy": "publishedAt",
        },
        timeout=config.http_timeout_seconds,
    )
    if not isinstance(data, dict) or not isinstance(data.get("articles"), list):
        raise UpstreamError("newsapi response has no articles list")

    candidates: list[dict[str, Any]] = []
    for article in data["articles"]:
        if not isinstance(article, dict):
            continue
        source = article.get("source")
        candidates.append(
            {
                "title": article.get("title"),
                "link": article.get("url"),
                "source": source.get("name") if isinstance(source, dict) else source,
                "published_at": article.get("publishedAt"),
                "description": article.get("description"),
                "image_url": article.get("urlToImage"),
            }
        )
    return candidates


def _request_newsdata(config: NewsdeskConfig) -> list[dict[str, Any]]:
    data = get_json(
        config.news_api_url,
        params={
            "apikey": config.news_api_key,
            "category": "business",
            "language": "en",
            "size": str(config.news_page_size),
        },
        timeout=config.http_timeout_seconds,
    )
    if not isinstance(data, dict) or not isinstance(data.get("results"), list):
        raise UpstreamError("newsdata response has no results list")

    candidates: list[dict[str, Any]] = []
    for article in data["results"]:
        if not isinstance(article, dict):
            continue
        candidates.append(
            {
                "title": article.get("title"),
                "link": article.get("link"),
                "source": article.get("source_id"),
                "published_at": article.get("pubDate"),
                "description": article.get("description"),
                "image_url": article.get("image_url"),
            }
        )
    return candidates


def fetch_candidates(config: NewsdeskConfig) -> list[dict[str, Any]]:
    """Raw provider articles mapped onto a common key set, unfiltered."""
    if config.news_provider == "newsdata":
        return _request_newsdata(config)
    return _request_newsapi(config)


def is_fresh(published_at: Any, now: datetime) -> bool:
    published = parse_timestamp(published_at)
    return published is not None and published > now - FRESHNESS_WINDOW


def enrich_candidates(candidates: list[dict[str, Any]], now: Optional[datetime] = None) -> list[Article]:
    """Drop stale candidates, attach themes and age labels, then drop incomplete ones."""
    current = now or utcnow()
    fresh = [item for item in candidates if is_fresh(item.get("published_at"), current)]

    mapped = [
        {
            "title": _text(item.get("title")),
            "link": _text(item.get("link")),
            "source": _text(item.get("source")),
            "themes": classify_title(_text(item.get("title"))),
            "pubDate": _text(item.get("published_at")),
            "timeAgo": format_time_ago(item.get("published_at"), now=current),
            "description": _optional_text(item.get("description")),
            "imageUrl": _optional_text(item.get("image_url")),
        }
        for item in fresh
    ]
    return [Article(**row) for row in mapped if row["title"] and row["link"]]


def fetch_news(config: Optional[NewsdeskConfig] = None, now: Optional[datetime] = None) -> list[Article]:
    """Fetch and enrich the current business headlines; returns ``[]`` on any provider failure."""
    cfg = config or load_config()
    if not cfg.news_api_key:
        logger.warning("news_fetch_skipped reason=missing_api_key provider=%s", cfg.news_provider)
        return []

    try:
        candidates = fetch_candidates(cfg)
    except UpstreamError as exc:
        logger.warning("news_fetch_failed provider=%s error=%s", cfg.news_provider, exc)
        return []

    articles = enrich_candidates(candidates, now=now)
    logger.info(
        "news_fetch_success provider=%s candidates=%d kept=%d",
        cfg.news_provider,
        len(candidates),
        len(articles),
    )
    return articles


def filter_articles(
    articles: list[Article],
    *,
    source: Optional[str] = None,
    theme: Optional[str] = None,
) -> list[Article]:
    filtered = articles
    if source and source != ALL:
        filtered = [article for article in filtered if article.source == source]
    if theme and theme != ALL:
        filtered = [article for article in filtered if theme in article.themes]
    return filtered


def list_sources(articles: list[Article]) -> list[str]:
    """Distinct sources in first-seen order."""
    return list(dict.fromkeys(article.source for article in articles))


def freshest(articles: list[Article], limit: int) -> list[Article]:
    def _key(article: Article) -> datetime:
        return parse_timestamp(article.pubDate) or datetime.min.replace(tzinfo=timezone.utc)

    return sorted(articles, key=_key, reverse=True)[: max(0, limit)]


__all__ = [
    "ALL",
    "Article",
    "FRESHNESS_WINDOW",
    "enrich_candidates",
    "fetch_candidates",
    "fetch_news",
    "filter_articles",
    "freshest",
    "is_fresh",
    "list_sources",
]
