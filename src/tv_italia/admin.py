"""Administrator gate and channel form handling."""

import hmac
import logging
import time
from dataclasses import replace
from typing import Any, Dict, Optional

from .channel import Category, Channel
from .classifier import classify
from .config import config
from .exceptions import ChannelValidationError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "streamUrl")

def check_password(candidate: str) -> bool:
    """Compare against the shared administrator secret."""
    if not isinstance(candidate, str):
        return False
    if hmac.compare_digest(candidate.encode(), config.ADMIN_PASSWORD.encode()):
        return True
    logger.warning("Rejected administrator login")
    return False

def new_channel_id() -> str:
    return f"custom-{int(time.time() * 1000)}"

def _optional(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None

def channel_from_form(data: Dict[str, Any], catalog, existing: Channel = None) -> Channel:
    """Validate submitted form data and build the channel to store.

    New channels get a ``custom-<ms>`` id, zeroed metrics and the next free
    order; edits keep the existing id, rating and view count.
    """
    if not isinstance(data, dict):
        raise ChannelValidationError("No data provided")

    for field in REQUIRED_FIELDS:
        if not str(data.get(field) or "").strip():
            raise ChannelValidationError(f"Missing required field: {field}")

    try:
        category = Category.parse(data.get("category") or Category.ENTERTAINMENT)
    except ValueError as e:
        raise ChannelValidationError(str(e)) from e
    if category is Category.ALL:
        raise ChannelValidationError("Category 'Tutti' is a filter, not a channel category")

    order = data.get("order")
    if order in (None, ""):
        order = existing.order if existing else catalog.next_order()
    else:
        try:
            order = int(order)
        except (TypeError, ValueError) as e:
            raise ChannelValidationError(f"Invalid order: {order!r}") from e

    stream_url = str(data["streamUrl"]).strip()
    fields = dict(
        name=str(data["name"]).strip(),
        description=str(data.get("description") or "").strip(),
        category=category,
        stream_url=stream_url,
        stream_type=classify(stream_url).mode,
        logo_url=_optional(data, "logoUrl"),
        website_url=_optional(data, "websiteUrl"),
        rss_url=_optional(data, "rssUrl"),
        youtube_channel_id=_optional(data, "youtubeChannelId"),
        order=order,
        is_live=True,
        is_user_added=existing.is_user_added if existing else True,
    )

    if existing is not None:
        return replace(existing, **fields)
    return Channel(id=new_channel_id(), rating=0, view_count=0, **fields)
