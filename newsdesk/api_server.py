"""HTTP API for business headlines, market quotes, and the daily digest."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Query
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import load_config
from .digest_service import generate_digest
from .news_service import fetch_news, filter_articles, freshest, list_sources
from .quote_service import fetch_quotes


UNEXPECTED_MESSAGE = "An unexpected error occurred"


class ApiError(RuntimeError):
    def __init__(self, *, status_code: int, error: str, message: str = UNEXPECTED_MESSAGE) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error = error
        self.message = message


logger = logging.getLogger(__name__)
app = FastAPI(title="Financial Newsdesk API", version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ApiError)
async def api_error_handler(_, exc: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error, "message": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(_, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"error": "Invalid request", "message": "Query parameters could not be parsed"},
    )


@app.get("/news")
def get_news(
    source: Optional[str] = Query(default=None),
    theme: Optional[str] = Query(default=None),
) -> list[dict]:
    try:
        articles = fetch_news()
        filtered = filter_articles(articles, source=source, theme=theme)
    except Exception as exc:
        logger.exception("news_endpoint_failed")
        raise ApiError(status_code=500, error="Failed to fetch news") from exc

    logger.info("news_served source=%s theme=%s count=%d", source, theme, len(filtered))
    return [article.model_dump() for article in filtered]


@app.get("/filters")
def get_filters() -> dict:
    try:
        articles = fetch_news()
        return {"sources": list_sources(articles)}
    except Exception as exc:
        logger.exception("filters_endpoint_failed")
        raise ApiError(status_code=500, error="Failed to fetch sources") from exc


@app.get("/stocks")
def get_stocks() -> list[dict]:
    try:
        quotes = fetch_quotes()
    except Exception as exc:
        logger.exception("stocks_endpoint_failed")
        raise ApiError(status_code=500, error="Failed to fetch stock data") from exc

    return [quote.model_dump() for quote in quotes]


@app.get("/summary")
def get_summary() -> dict:
    try:
        config = load_config()
        articles = freshest(fetch_news(config), config.summary_article_limit)
        return {"summary": generate_digest(articles, config)}
    except Exception as exc:
        logger.exception("summary_endpoint_failed")
        raise ApiError(status_code=500, error="Failed to generate summary") from exc


@app.get("/health")
def get_health() -> dict:
    return {"status": "ok"}
