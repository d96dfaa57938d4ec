"""News feeds for channel sidebars and the home ticker."""

import logging
import re
from typing import List, NamedTuple

import requests
from defusedxml import ElementTree as ET

from .config import config

logger = logging.getLogger(__name__)

DESCRIPTION_LENGTH = 100
DEFAULT_TICKER_COLOR = "#3b82f6"

TAG_RE = re.compile(r"<[^>]*>?")


class NewsItem(NamedTuple):
    title: str
    link: str
    pub_date: str
    description: str


class TickerItem(NamedTuple):
    title: str
    description: str
    color: str
    image_url: str


def strip_html(text: str) -> str:
    return TAG_RE.sub("", text or "")


def fetch_feed(feed_url: str) -> List[NewsItem]:
    """Latest items of an RSS feed, converted through rss2json.

    Returns an empty list on any failure.
    """
    if not feed_url:
        return []

    try:
        response = requests.get(
            config.RSS_TO_JSON_API,
            params={"rss_url": feed_url},
            timeout=config.HTTP_TIMEOUT,
        )
        response.raise_for_status()
        data = response.json()

        if data.get("status") != "ok" or not isinstance(data.get("items"), list):
            logger.warning(f"Feed conversion failed for {feed_url}: {data.get('message', data.get('status'))}")
            return []

        items = []
        for entry in data["items"]:
            description = strip_html(entry.get("description"))[:DESCRIPTION_LENGTH] + "..."
            items.append(NewsItem(
                title=entry.get("title", ""),
                link=entry.get("link", ""),
                pub_date=entry.get("pubDate", ""),
                description=description,
            ))
        logger.info(f"Fetched {len(items)} news items from {feed_url}")
        return items

    except Exception as e:
        logger.error(f"Failed to load RSS feed {feed_url}: {e}")
        return []


def parse_ticker(xml_text: str) -> List[TickerItem]:
    """Parse the ticker XML.

    The feed reuses RSS tags: ``pubDate`` holds a hex colour and ``link``
    holds the image URL.
    """
    root = ET.fromstring(xml_text)
    items = []
    for item in root.iter("item"):
        def value(tag: str) -> str:
            return (item.findtext(tag) or "").strip()

        title = value("title")
        if not title:
            continue
        color = value("pubDate")
        if not color.startswith("#"):
            color = DEFAULT_TICKER_COLOR
        items.append(TickerItem(
            title=title,
            description=value("description"),
            color=color,
            image_url=value("link"),
        ))
    return items


def fetch_ticker(url: str = None) -> List[TickerItem]:
    """Current ticker items, or an empty list on any failure."""
    url = url or config.TICKER_FEED_URL
    try:
        response = requests.get(url, timeout=config.HTTP_TIMEOUT)
        response.raise_for_status()
        return parse_ticker(response.text)
    except Exception as e:
        logger.error(f"Error fetching news ticker: {e}")
        return []
