"""Catalog reconciliation.

Every catalog load merges the canonical system channels with whatever was
persisted last time:

* canonical channels always come back, with the template's descriptive
  fields and the persisted rating, view count and order;
* user-added channels are carried through unchanged;
* the two pinned ids go first, everything else follows by order key.
"""

import json
import logging
from dataclasses import replace
from typing import Iterable, List, Optional, Sequence

from .canonical import PINNED_FIRST_ID, PINNED_SECOND_ID, SYSTEM_CHANNELS
from .channel import Channel
from .exceptions import CatalogCorruptError

logger = logging.getLogger(__name__)


def decode_catalog(blob: Optional[str]) -> Optional[List[Channel]]:
    """Parse a persisted blob. ``None`` means nothing was persisted.

    Raises CatalogCorruptError when the blob is not a JSON array. Single
    records that cannot be read are skipped.
    """
    if blob is None:
        return None

    try:
        data = json.loads(blob)
    except (TypeError, ValueError, RecursionError) as e:
        raise CatalogCorruptError(f"Catalog blob is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise CatalogCorruptError(f"Catalog blob is a {type(data).__name__}, expected a list")

    channels = []
    for index, record in enumerate(data):
        try:
            channels.append(Channel.from_dict(record))
        except CatalogCorruptError as e:
            logger.warning(f"Skipping persisted record #{index}: {e}")
    return channels


def encode_catalog(channels: Iterable[Channel]) -> str:
    return json.dumps([channel.to_dict() for channel in channels], ensure_ascii=False)


def sort_key(channel: Channel):
    if channel.id == PINNED_FIRST_ID:
        return (0, 0)
    if channel.id == PINNED_SECOND_ID:
        return (1, 0)
    return (2, channel.sort_order)


def sort_channels(channels: Iterable[Channel]) -> List[Channel]:
    """Pinned ids first, then ascending order key. Ties keep input order."""
    return sorted(channels, key=sort_key)


def _first_by_id(channels: Iterable[Channel], label: str) -> dict:
    found = {}
    for channel in channels:
        if channel.id in found:
            logger.warning(f"Duplicate {label} record for id '{channel.id}', keeping the first one")
            continue
        found[channel.id] = channel
    return found


def merge_system_channel(template: Channel, saved: Optional[Channel]) -> Channel:
    """Template descriptive fields plus the persisted metrics and order."""
    if saved is None:
        return replace(template, view_count=0)
    return replace(
        template,
        view_count=saved.view_count or 0,
        rating=saved.rating or 0,
        order=saved.order if saved.order is not None else template.order,
    )


def reconcile(persisted: Optional[Sequence[Channel]],
              templates: Sequence[Channel] = SYSTEM_CHANNELS) -> List[Channel]:
    """Merge canonical templates with persisted channels.

    ``persisted`` is ``None`` for a fresh install (or an unreadable blob):
    the result is then the templates with every view count reset to 0.
    """
    if persisted is None:
        return sort_channels(replace(template, view_count=0) for template in templates)

    system_ids = {template.id for template in templates}
    saved_system = _first_by_id((c for c in persisted if c.id in system_ids), "system")
    user_channels = list(_first_by_id((c for c in persisted if c.id not in system_ids), "user").values())

    merged = [merge_system_channel(template, saved_system.get(template.id)) for template in templates]
    return sort_channels(merged + user_channels)
