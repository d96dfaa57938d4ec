"""Stream location classification.

A channel's ``stream_url`` is an opaque string. This module decides how it
is delivered: as an embedded YouTube player, as an adaptive/direct media
stream handed to a stream client, or as an arbitrary embeddable web page.
Classification is deterministic and has no side effects.
"""

import logging
import re
from enum import Enum
from typing import NamedTuple, Optional
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


class DeliveryMode(str, Enum):
    EMBEDDED_VIDEO_PLATFORM = "embedded_video_platform"
    ADAPTIVE_STREAM = "adaptive_stream"
    GENERIC_EMBED = "generic_embed"


class Classification(NamedTuple):
    mode: DeliveryMode
    # Video id for the embedded platform, the unchanged string otherwise
    location: str


PLATFORM_MARKERS = ("youtube.com", "youtu.be", "youtube-nocookie.com")

MEDIA_EXTENSIONS = (".m3u8", ".mpd", ".mp4", ".m4v", ".webm", ".mov", ".ts")

VIDEO_ID = r"([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])"

VIDEO_ID_PATTERNS = [
    re.compile(r"[?&]v=" + VIDEO_ID),
    re.compile(r"youtu\.be/" + VIDEO_ID),
    # /embed/live_stream?channel=... names a channel, not a video
    re.compile(r"/(?:embed|v|live|shorts)/(?!live_stream)" + VIDEO_ID),
]

BARE_VIDEO_ID = re.compile(r"^[A-Za-z0-9_-]{11}$")

EMBED_URL = "https://www.youtube.com/embed/{video_id}?autoplay=1"


def is_platform_url(location: str) -> bool:
    lowered = location.lower()
    return any(marker in lowered for marker in PLATFORM_MARKERS)


def is_video_id(value: str) -> bool:
    return bool(BARE_VIDEO_ID.match(value or ""))


def extract_video_id(location: str) -> Optional[str]:
    """Return the 11-character video id of a YouTube URL, if one is found."""
    for pattern in VIDEO_ID_PATTERNS:
        match = pattern.search(location)
        if match:
            return match.group(1)
    return None


def is_media_url(location: str) -> bool:
    path = urlparse(location).path or location
    return path.lower().endswith(MEDIA_EXTENSIONS) or location.lower().endswith(MEDIA_EXTENSIONS)


def classify(location: str) -> Classification:
    """Classify a stream location string into its delivery mode."""
    location = (location or "").strip()

    if is_platform_url(location):
        video_id = extract_video_id(location)
        if video_id is None:
            logger.warning(f"Could not extract a video id from {location!r}, using it as is")
            video_id = location
        return Classification(DeliveryMode.EMBEDDED_VIDEO_PLATFORM, video_id)

    if is_media_url(location):
        return Classification(DeliveryMode.ADAPTIVE_STREAM, location)

    return Classification(DeliveryMode.GENERIC_EMBED, location)


def classify_channel(channel) -> Classification:
    """Classify a channel from its live ``stream_url``.

    The stored ``stream_type`` hint only matters for a bare video id (as
    written by older admin forms); everywhere else the string wins.
    """
    result = classify(channel.stream_url)
    hint = channel.stream_type
    location = (channel.stream_url or "").strip()

    if (result.mode is DeliveryMode.GENERIC_EMBED
            and hint is DeliveryMode.EMBEDDED_VIDEO_PLATFORM
            and is_video_id(location)):
        return Classification(DeliveryMode.EMBEDDED_VIDEO_PLATFORM, location)

    if hint is not None and hint is not result.mode:
        logger.debug(f"Channel {channel.id}: hint {hint.value} overridden by {result.mode.value}")
    return result


def embed_url(classification: Classification) -> str:
    """URL to embed for a classification."""
    if classification.mode is DeliveryMode.EMBEDDED_VIDEO_PLATFORM and is_video_id(classification.location):
        return EMBED_URL.format(video_id=classification.location)
    return classification.location
