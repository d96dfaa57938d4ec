"""Derived views of the catalog: filtering, ranking and the home layout."""

from typing import List, NamedTuple, Optional, Sequence, Tuple

from .canonical import PINNED_FIRST_ID
from .channel import Category, Channel

TOP_RATED_LIMIT = 5


class HomeView(NamedTuple):
    featured: Optional[Channel]
    channels: List[Channel]
    top_rated: List[Channel]


def matches(channel: Channel, category: Category = Category.ALL, search: str = "") -> bool:
    if category is not Category.ALL and channel.category is not category:
        return False
    if not search:
        return True
    term = search.lower()
    return term in channel.name.lower() or term in channel.description.lower()


def filter_channels(channels: Sequence[Channel], category: Category = Category.ALL,
                    search: str = "") -> List[Channel]:
    """Channels in ``category`` whose name or description contains ``search``."""
    return [channel for channel in channels if matches(channel, category, search)]


def top_rated(channels: Sequence[Channel], limit: int = TOP_RATED_LIMIT) -> List[Channel]:
    """Highest rated first; equal ratings keep catalog order."""
    return sorted(channels, key=lambda channel: -(channel.rating or 0))[:limit]


def featured_split(filtered: Sequence[Channel], category: Category = Category.ALL, search: str = "",
                   home_id: str = PINNED_FIRST_ID) -> Tuple[Optional[Channel], List[Channel]]:
    """Split the filtered list into the featured channel and the rest.

    The split only applies to the unfiltered home view. With a search term
    or a category filter there is no featured channel and every result is
    returned.
    """
    if search or category is not Category.ALL:
        return None, list(filtered)

    featured = next((channel for channel in filtered if channel.id == home_id), None)
    if featured is None and filtered:
        featured = filtered[0]
    if featured is None:
        return None, []
    return featured, [channel for channel in filtered if channel.id != featured.id]


def build_home(channels: Sequence[Channel], category: Category = Category.ALL,
               search: str = "") -> HomeView:
    filtered = filter_channels(channels, category, search)
    featured, rest = featured_split(filtered, category, search)
    return HomeView(featured=featured, channels=rest, top_rated=top_rated(channels))
