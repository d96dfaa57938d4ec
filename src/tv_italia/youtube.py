"""YouTube integration for on-demand videos of a channel."""

import logging
import time
from typing import Optional, List, Dict, Any

import yt_dlp

from .channel import Channel
from .classifier import DeliveryMode, classify_channel, is_video_id

logger = logging.getLogger(__name__)

CHANNEL_URL = "https://www.youtube.com/channel/{reference}"
WATCH_URL = "https://www.youtube.com/watch?v={video_id}"

class YouTubeManager:
    """Lists recent videos of a channel's YouTube reference."""

    def __init__(self, cache_lifetime: int = 3600):
        self.ydl_opts = {
            'quiet': True,
            'no_warnings': True,
            'extract_flat': True,
            'nocheckcertificate': True,
        }
        self.cache_lifetime = cache_lifetime
        self._video_cache: Dict[str, List[Dict[str, Any]]] = {}
        self._cache_timestamps: Dict[str, float] = {}

    @staticmethod
    def channel_url(reference: str) -> str:
        """URL of a channel from its ``UC...`` id or a full URL."""
        if reference.startswith("UC"):
            return CHANNEL_URL.format(reference=reference)
        return reference

    def get_cached_videos(self, reference: str) -> List[Dict[str, Any]]:
        """Cached videos for ``reference`` if they are recent enough."""
        cached = self._video_cache.get(reference)
        if cached and time.time() - self._cache_timestamps.get(reference, 0) < self.cache_lifetime:
            logger.info(f"Using cached videos for {reference} ({len(cached)} available)")
            return list(cached)
        return []

    def get_channel_videos(self, reference: str, max_results: int = 10) -> List[Dict[str, Any]]:
        """Get recent videos from a YouTube channel."""
        if not reference:
            return []

        cached = self.get_cached_videos(reference)
        if cached:
            return cached[:max_results]

        url = self.channel_url(reference)
        try:
            opts = {
                **self.ydl_opts,
                'playlistend': max_results,
            }

            with yt_dlp.YoutubeDL(opts) as ydl:
                result = ydl.extract_info(f"{url.rstrip('/')}/videos", download=False)

                videos = []
                for entry in (result or {}).get('entries') or []:
                    if entry and entry.get('id'):
                        videos.append({
                            'id': entry.get('id'),
                            'title': entry.get('title', 'Unknown'),
                            'url': WATCH_URL.format(video_id=entry.get('id')),
                            'duration': entry.get('duration'),
                            'is_live': entry.get('live_status') == 'is_live',
                        })

                if videos:
                    self._video_cache[reference] = videos
                    self._cache_timestamps[reference] = time.time()

                logger.info(f"Found {len(videos)} videos from channel: {url}")
                return videos

        except Exception as e:
            logger.error(f"Failed to get channel videos: {e}")
            return []

    def external_link(self, channel: Channel) -> Optional[str]:
        """Link for opening the channel on YouTube, if it has one."""
        classification = classify_channel(channel)
        if classification.mode is DeliveryMode.EMBEDDED_VIDEO_PLATFORM:
            if is_video_id(classification.location):
                return WATCH_URL.format(video_id=classification.location)
            return channel.stream_url
        if channel.youtube_channel_id:
            return self.channel_url(channel.youtube_channel_id)
        return None
