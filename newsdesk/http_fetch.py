"""Single-attempt JSON requests against third-party providers."""
from __future__ import annotations

import json
from http.client import HTTPException
from typing import Any, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

DEFAULT_HTTP_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; NewsdeskBot/1.0)",
    "Accept": "application/json, text/plain;q=0.9, */*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


class UpstreamError(RuntimeError):
    """Raised when a provider is unreachable or returns an unusable response."""


class UpstreamRateLimitError(UpstreamError):
    """Raised when a provider answers with HTTP 429."""


def _with_query(url: str, params: Optional[dict[str, Any]]) -> str:
    if not params:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{urlencode(params)}"


def _send(request: Request, timeout: float) -> Any:
    try:
        with urlopen(request, timeout=timeout) as response:
            raw = response.read().decode("utf-8", errors="ignore")
    except HTTPError as exc:
        if exc.code == 429:
            raise UpstreamRateLimitError(f"Provider rate limited: {request.full_url.split('?')[0]}") from exc
        detail = exc.read().decode("utf-8", errors="ignore") if exc.fp is not None else ""
        raise UpstreamError(f"Provider HTTP {exc.code}: {detail[:180]}") from exc
    except URLError as exc:
        raise UpstreamError(f"Provider unreachable: {exc}") from exc
    except TimeoutError as exc:
        raise UpstreamError("Provider request timed out") from exc
    except (OSError, HTTPException) as exc:
        raise UpstreamError(f"Provider unreachable: {exc!r}") from exc

    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise UpstreamError("Provider returned invalid JSON") from exc


def get_json(
    url: str,
    *,
    params: Optional[dict[str, Any]] = None,
    headers: Optional[dict[str, str]] = None,
    timeout: float = 10.0,
) -> Any:
    request_headers = dict(DEFAULT_HTTP_HEADERS)
    if headers:
        request_headers.update(headers)
    request = Request(_with_query(url, params), method="GET", headers=request_headers)
    return _send(request, timeout)


def post_json(
    url: str,
    body: Any,
    *,
    headers: Optional[dict[str, str]] = None,
    timeout: float = 10.0,
) -> Any:
    request_headers = dict(DEFAULT_HTTP_HEADERS)
    request_headers["Content-Type"] = "application/json"
    if headers:
        request_headers.update(headers)
    request = Request(
        url,
        data=json.dumps(body).encode("utf-8"),
        method="POST",
        headers=request_headers,
    )
    return _send(request, timeout)


__all__ = ["DEFAULT_HTTP_HEADERS", "UpstreamError", "UpstreamRateLimitError", "get_json", "post_json"]
