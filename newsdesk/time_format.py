"""Timestamp parsing and relative "age" labels for articles."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Optional

logger = logging.getLogger(__name__)

JUST_NOW = "just now"
DATE_UNAVAILABLE = "date unavailable"

_FALLBACK_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d",
)


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse provider timestamps into aware UTC datetimes; ``None`` when unparseable.

    Naive values are taken to be UTC, which is what both news providers emit.
    """
    if isinstance(value, datetime):
        dt = value
    else:
        if not isinstance(value, str) or not value.strip():
            return None
        text = value.strip()
        iso = text[:-1] + "+00:00" if text.endswith("Z") else text
        try:
            dt = datetime.fromisoformat(iso)
        except ValueError:
            for fmt in _FALLBACK_FORMATS:
                try:
                    dt = datetime.strptime(text, fmt)
                    break
                except ValueError:
                    continue
            else:
                try:
                    dt = parsedate_to_datetime(text)
                except (TypeError, ValueError, IndexError):
                    return None
                if dt is None:
                    return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    try:
        return dt.astimezone(timezone.utc)
    except OverflowError:
        return None


def _absolute_label(dt: datetime) -> str:
    return f"{dt.strftime('%b')} {dt.day}, {dt.strftime('%I:%M %p')}"


def format_time_ago(value: Any, now: Optional[datetime] = None) -> str:
    """Render a coarse age such as ``5m ago``; never raises."""
    try:
        published = parse_timestamp(value)
        if published is None:
            return DATE_UNAVAILABLE

        elapsed = (now or utcnow()) - published
        if elapsed < timedelta(0):
            return JUST_NOW

        minutes = int(elapsed.total_seconds() // 60)
        hours = minutes // 60
        days = hours // 24
        if minutes < 1:
            return JUST_NOW
        if minutes < 60:
            return f"{minutes}m ago"
        if hours < 24:
            return f"{hours}h ago"
        if days < 7:
            return f"{days}d ago"
        return _absolute_label(published)
    except Exception:
        logger.warning("time_format_failed value=%r", value, exc_info=True)
        return DATE_UNAVAILABLE


__all__ = ["DATE_UNAVAILABLE", "JUST_NOW", "format_time_ago", "parse_timestamp", "utcnow"]
