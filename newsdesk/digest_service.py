"""Daily recap text: bucketed headline draft with optional model summarization."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .config import NewsdeskConfig, load_config
from .http_fetch import UpstreamError, post_json
from .news_service import Article

logger = logging.getLogger(__name__)

NO_UPDATES_MESSAGE = "No major news updates available at this time."
DIGEST_HEADER = "Today's Financial News Summary:"
TITLES_PER_SECTION = 3

MARKET_THEMES = frozenset({"Markets", "Stocks"})
ECONOMIC_THEMES = frozenset({"Economy", "Banking"})

SECTION_TITLES = (
    ("market", "Market-Moving News"),
    ("economic", "Economic Updates"),
    ("other", "Other Notable News"),
)

SUMMARY_PARAMETERS = {
    "max_length": 130,
    "min_length": 30,
    "num_beams": 4,
    "do_sample": False,
}


class SummaryShapeError(ValueError):
    """Raised when the summarization endpoint answers with an unexpected body."""


@dataclass(frozen=True)
class DigestResult:
    text: str
    summarized: bool


def bucket_articles(articles: list[Article]) -> dict[str, list[Article]]:
    """Group by theme; an article can land in both the market and economic buckets."""
    buckets: dict[str, list[Article]] = {"market": [], "economic": [], "other": []}
    for article in articles:
        themes = set(article.themes)
        if themes & MARKET_THEMES:
            buckets["market"].append(article)
        if themes & ECONOMIC_THEMES:
            buckets["economic"].append(article)
        if not themes & (MARKET_THEMES | ECONOMIC_THEMES):
            buckets["other"].append(article)
    return buckets


def render_draft(articles: list[Article]) -> str:
    buckets = bucket_articles(articles)
    lines = [DIGEST_HEADER, ""]
    for key, heading in SECTION_TITLES:
        bucket = buckets[key]
        if not bucket:
            continue
        lines.append(f"{heading}:")
        lines.extend(f"- {article.title}" for article in bucket[:TITLES_PER_SECTION])
        lines.append("")
    return "\n".join(lines).strip()


def summarize_text(text: str, config: NewsdeskConfig) -> str:
    """Send text to the hosted summarization model and return its summary."""
    payload = post_json(
        config.summary_api_url,
        {"inputs": text, "parameters": dict(SUMMARY_PARAMETERS)},
        headers={"Authorization": f"Bearer {config.summary_api_key}"},
        timeout=config.http_timeout_seconds,
    )
    if isinstance(payload, list) and payload and isinstance(payload[0], dict):
        summary = payload[0].get("summary_text")
        if isinstance(summary, str) and summary.strip():
            return summary.strip()
    raise SummaryShapeError(f"unexpected summarization response: {str(payload)[:180]}")


def build_digest(articles: list[Article], config: Optional[NewsdeskConfig] = None) -> DigestResult:
    if not articles:
        return DigestResult(text=NO_UPDATES_MESSAGE, summarized=False)

    draft = render_draft(articles)
    cfg = config or load_config()
    if not cfg.summary_api_key:
        logger.warning("digest_summarize_skipped reason=missing_api_key")
        return DigestResult(text=draft, summarized=False)

    try:
        summary = summarize_text(draft, cfg)
    except (UpstreamError, SummaryShapeError) as exc:
        logger.warning("digest_summarize_failed error=%s", exc)
        return DigestResult(text=draft, summarized=False)
    except Exception:  # pragma: no cover - guard provider schema drift
        logger.exception("digest_summarize_unexpected_error")
        return DigestResult(text=draft, summarized=False)

    return DigestResult(text=summary, summarized=True)


def generate_digest(articles: list[Article], config: Optional[NewsdeskConfig] = None) -> str:
    return build_digest(articles, config).text


__all__ = [
    "DIGEST_HEADER",
    "DigestResult",
    "NO_UPDATES_MESSAGE",
    "SummaryShapeError",
    "bucket_articles",
    "build_digest",
    "generate_digest",
    "render_draft",
    "summarize_text",
]
