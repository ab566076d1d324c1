from __future__ import annotations

import unittest
from datetime import timedelta
from http.client import IncompleteRead
from unittest.mock import patch

from newsdesk.digest_service import NO_UPDATES_MESSAGE
from newsdesk.news_service import Article
from newsdesk.quote_service import Quote
from newsdesk.themes import classify_title
from newsdesk.time_format import utcnow

try:
    from fastapi.testclient import TestClient
    from newsdesk.api_server import app
    HAS_FASTAPI = True
except ModuleNotFoundError:
    HAS_FASTAPI = False


def _article(title: str, source: str, hours_ago: int = 1) -> Article:
    return Article(
        title=title,
        link=f"https://example.com/{source}/{hours_ago}",
        source=source,
        themes=classify_title(title),
        pubDate=(utcnow() - timedelta(hours=hours_ago)).isoformat(),
        timeAgo=f"{hours_ago}h ago",
    )


ARTICLES = [
    _article("Bitcoin climbs past resistance", "CoinDesk", 1),
    _article("Treasury yields ease after jobs data", "Reuters", 2),
    _article("Ethereum upgrade lifts crypto sentiment", "Reuters", 3),
]


class ApiServerTests(unittest.TestCase):
    def setUp(self) -> None:
        if not HAS_FASTAPI:
            self.skipTest("fastapi is not installed")
        self.client = TestClient(app)

    def test_health(self) -> None:
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_news_without_filters_returns_everything(self) -> None:
        with patch("newsdesk.api_server.fetch_news", return_value=ARTICLES):
            plain = self.client.get("/news")
            explicit = self.client.get("/news", params={"source": "All", "theme": "All"})
        self.assertEqual(plain.status_code, 200)
        self.assertEqual(len(plain.json()), 3)
        self.assertEqual(explicit.json(), plain.json())
        self.assertTrue(
            {"title", "link", "source", "themes", "pubDate", "timeAgo", "description", "imageUrl"}.issubset(
                plain.json()[0].keys()
            )
        )

    def test_news_filters_by_theme_then_source(self) -> None:
        with patch("newsdesk.api_server.fetch_news", return_value=ARTICLES):
            crypto = self.client.get("/news", params={"theme": "Crypto"}).json()
            reuters_crypto = self.client.get("/news", params={"source": "Reuters", "theme": "Crypto"}).json()
        self.assertEqual(len(crypto), 2)
        self.assertTrue(all("Crypto" in item["themes"] for item in crypto))
        self.assertEqual([item["title"] for item in reuters_crypto], ["Ethereum upgrade lifts crypto sentiment"])

    def test_news_unexpected_error_returns_500_envelope(self) -> None:
        with patch("newsdesk.api_server.fetch_news", side_effect=RuntimeError("boom")):
            response = self.client.get("/news")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.json(),
            {"error": "Failed to fetch news", "message": "An unexpected error occurred"},
        )

    def test_filters_lists_distinct_sources(self) -> None:
        with patch("newsdesk.api_server.fetch_news", return_value=ARTICLES):
            response = self.client.get("/filters")
        self.assertEqual(response.json(), {"sources": ["CoinDesk", "Reuters"]})

    def test_stocks(self) -> None:
        quotes = [
            Quote(symbol="GSPC", price="5100.00", change="12.00", changePercent="0.24", isPositive=True),
            Quote(symbol="GC", price="2300.10", change="-4.20", changePercent="-0.18", isPositive=False),
        ]
        with patch("newsdesk.api_server.fetch_quotes", return_value=quotes):
            response = self.client.get("/stocks")
        self.assertEqual(response.status_code, 200)
        self.assertEqual([item["symbol"] for item in response.json()], ["GSPC", "GC"])
        self.assertFalse(response.json()[1]["isPositive"])

    def test_stocks_unexpected_error_returns_500_envelope(self) -> None:
        with patch("newsdesk.api_server.fetch_quotes", side_effect=RuntimeError("boom")):
            response = self.client.get("/stocks")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"], "Failed to fetch stock data")

    def test_summary_without_articles(self) -> None:
        with patch.dict("os.environ", {"HUGGINGFACE_API_KEY": ""}, clear=False):
            with patch("newsdesk.api_server.fetch_news", return_value=[]):
                response = self.client.get("/summary")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"summary": NO_UPDATES_MESSAGE})

    def test_summary_uses_twenty_freshest_articles(self) -> None:
        many = [_article(f"Stock market update {idx}", "Reuters", idx) for idx in range(1, 26)]
        captured = {}

        def fake_digest(articles, _config):
            captured["articles"] = articles
            return "digest"

        with patch.dict("os.environ", {"SUMMARY_ARTICLE_LIMIT": "20"}, clear=False):
            with patch("newsdesk.api_server.fetch_news", return_value=list(reversed(many))):
                with patch("newsdesk.api_server.generate_digest", side_effect=fake_digest):
                    response = self.client.get("/summary")

        self.assertEqual(response.json(), {"summary": "digest"})
        self.assertEqual(len(captured["articles"]), 20)
        self.assertEqual(captured["articles"][0].title, "Stock market update 1")

    def test_news_end_to_end_with_stubbed_provider(self) -> None:
        now = utcnow()
        payload = {
            "articles": [
                {
                    "source": {"name": "Reuters"},
                    "title": "Dow gains as banks rally",
                    "url": "https://example.com/1",
                    "publishedAt": (now - timedelta(hours=1)).isoformat(),
                },
                {
                    "source": {"name": "CNBC"},
                    "title": "Oil slips on demand worries",
                    "url": "https://example.com/2",
                    "publishedAt": (now - timedelta(hours=5)).isoformat(),
                },
                {
                    "source": {"name": "CNBC"},
                    "title": "Last week's earnings recap",
                    "url": "https://example.com/3",
                    "publishedAt": (now - timedelta(hours=30)).isoformat(),
                },
            ]
        }
        with patch.dict("os.environ", {"NEWS_API_KEY": "test-key", "NEWS_PROVIDER": "newsapi"}, clear=False):
            with patch("newsdesk.news_service.get_json", return_value=payload):
                response = self.client.get("/news")

        body = response.json()
        self.assertEqual(response.status_code, 200)
        self.assertEqual([item["link"] for item in body], ["https://example.com/1", "https://example.com/2"])
        self.assertTrue(all(item["timeAgo"] for item in body))

    def test_news_and_filters_degrade_when_provider_drops_connection(self) -> None:
        with patch.dict("os.environ", {"NEWS_API_KEY": "test-key", "NEWS_PROVIDER": "newsapi"}, clear=False):
            with patch("newsdesk.http_fetch.urlopen", side_effect=IncompleteRead(b"partial")):
                news = self.client.get("/news")
                filters = self.client.get("/filters")

        self.assertEqual(news.status_code, 200)
        self.assertEqual(news.json(), [])
        self.assertEqual(filters.status_code, 200)
        self.assertEqual(filters.json(), {"sources": []})


if __name__ == "__main__":
    unittest.main()
