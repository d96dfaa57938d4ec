"""The in-memory channel catalog and its persistence path."""

import logging
import threading
from dataclasses import replace
from typing import List, Optional, Sequence

from .canonical import SYSTEM_CHANNELS
from .channel import MAX_RATING, Channel
from .config import config
from .exceptions import CatalogCorruptError, ChannelNotFoundError
from .reconcile import decode_catalog, encode_catalog, reconcile
from .store import CatalogStore

logger = logging.getLogger(__name__)

class ChannelCatalog:
    """Owns the reconciled channel list.

    Every mutation goes through this object and is written back to the
    store immediately. Only one mutation runs at a time.
    """

    def __init__(self, store: CatalogStore = None, key: str = None,
                 templates: Sequence[Channel] = SYSTEM_CHANNELS):
        self.store = store or CatalogStore()
        self.key = key or config.CATALOG_KEY
        self.templates = tuple(templates)
        self.load_error: Optional[str] = None
        self._channels: List[Channel] = []
        self._lock = threading.RLock()

    @property
    def channels(self) -> List[Channel]:
        with self._lock:
            return list(self._channels)

    def load(self) -> List[Channel]:
        """Reconcile the persisted catalog with the system channels and
        write the result back."""
        with self._lock:
            self.load_error = None
            try:
                persisted = decode_catalog(self.store.get(self.key))
            except CatalogCorruptError as e:
                logger.error(f"Persisted catalog is corrupt, starting from system channels: {e}")
                self.load_error = str(e)
                persisted = None

            self._channels = reconcile(persisted, self.templates)
            self._save()
            logger.info(f"Loaded catalog with {len(self._channels)} channels")
            return list(self._channels)

    def get(self, channel_id: str) -> Channel:
        with self._lock:
            for channel in self._channels:
                if channel.id == channel_id:
                    return channel
        raise ChannelNotFoundError(channel_id)

    def find(self, channel_id: str) -> Optional[Channel]:
        try:
            return self.get(channel_id)
        except ChannelNotFoundError:
            return None

    def rate(self, channel_id: str, rating: int) -> Optional[Channel]:
        """Set a 1-5 star rating. Out-of-range values are ignored."""
        if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= MAX_RATING:
            logger.warning(f"Ignoring invalid rating {rating!r} for '{channel_id}'")
            return None
        return self._update(channel_id, lambda channel: replace(channel, rating=rating))

    def record_view(self, channel_id: str) -> Optional[Channel]:
        return self._update(channel_id, lambda channel: replace(channel, view_count=channel.view_count + 1))

    def next_order(self) -> int:
        with self._lock:
            return max([channel.order or 0 for channel in self._channels] + [0]) + 1

    def add_channel(self, channel: Channel) -> Channel:
        """Append a new channel and reconcile."""
        with self._lock:
            if any(existing.id == channel.id for existing in self._channels):
                raise ValueError(f"Channel '{channel.id}' already exists")
            if channel.order is None:
                channel = replace(channel, order=self.next_order())
            self._channels.append(channel)
            self._save()
            logger.info(f"Added channel: {channel.name} ({channel.id})")
            self.load()
            return self.get(channel.id)

    def update_channel(self, channel: Channel) -> Channel:
        """Replace the channel with the same id and reconcile."""
        with self._lock:
            self.get(channel.id)
            self._channels = [channel if existing.id == channel.id else existing
                              for existing in self._channels]
            self._save()
            logger.info(f"Updated channel: {channel.name} ({channel.id})")
            self.load()
            return self.get(channel.id)

    def delete_channel(self, channel_id: str) -> Channel:
        """Remove a channel from the persisted catalog.

        System channels are restored from their template on the next load.
        """
        with self._lock:
            channel = self.get(channel_id)
            self._channels = [existing for existing in self._channels if existing.id != channel_id]
            self._save()
            logger.info(f"Deleted channel: {channel.name} ({channel.id})")
            return channel

    def _update(self, channel_id: str, change) -> Optional[Channel]:
        with self._lock:
            for index, channel in enumerate(self._channels):
                if channel.id == channel_id:
                    updated = change(channel)
                    self._channels[index] = updated
                    self._save()
                    return updated
        logger.warning(f"Channel '{channel_id}' not in catalog, update skipped")
        return None

    def _save(self):
        self.store.set(self.key, encode_catalog(self._channels))
