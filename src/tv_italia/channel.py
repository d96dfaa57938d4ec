"""Channel record and category enumeration."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .classifier import DeliveryMode
from .exceptions import CatalogCorruptError

# Absent order keys sort after every explicit one
DEFAULT_ORDER = 999

MAX_RATING = 5


class Category(str, Enum):
    """Fixed channel categories. ``ALL`` means no filter is applied."""

    ALL = "Tutti"
    NEWS = "Notizie"
    SPORT = "Sport"
    MUSIC = "Musica"
    ENTERTAINMENT = "Intrattenimento"
    KIDS = "Bambini"
    RELIGION = "Religione"
    LOCAL = "Regionali"
    DOCUMENTARY = "Documentari"

    @classmethod
    def parse(cls, value: Any, default: "Category" = None) -> "Category":
        """Resolve a persisted value or member name to a category."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if value == member.value or value.upper() == member.name:
                    return member
        if default is None:
            raise ValueError(f"Unknown category: {value!r}")
        return default


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _stream_hint(value: Any) -> Optional[DeliveryMode]:
    # "youtube_id" and "direct_url" come from catalogs written before the
    # three-way classification existed; "direct_url" carries no usable hint.
    if value == "youtube_id":
        return DeliveryMode.EMBEDDED_VIDEO_PLATFORM
    try:
        return DeliveryMode(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Channel:
    """A live channel in the catalog."""

    id: str
    name: str = ""
    category: Category = Category.ENTERTAINMENT
    description: str = ""
    stream_url: str = ""
    stream_type: Optional[DeliveryMode] = None
    logo_url: Optional[str] = None
    website_url: Optional[str] = None
    rss_url: Optional[str] = None
    youtube_channel_id: Optional[str] = None
    is_live: bool = True
    is_user_added: bool = False
    order: Optional[int] = None
    rating: int = 0
    view_count: int = 0

    @property
    def sort_order(self) -> int:
        return DEFAULT_ORDER if self.order is None else self.order

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Channel":
        """Build a channel from a persisted record, applying defaults for
        every missing or malformed optional field.

        Raises CatalogCorruptError when the record is not a mapping or has
        no usable id.
        """
        if not isinstance(data, dict):
            raise CatalogCorruptError(f"Channel record is not an object: {data!r}")

        channel_id = _optional_text(data.get("id"))
        if channel_id is None:
            raise CatalogCorruptError(f"Channel record has no id: {data!r}")

        rating = _optional_int(data.get("rating")) or 0
        view_count = _optional_int(data.get("viewCount")) or 0

        return cls(
            id=channel_id,
            name=_text(data.get("name")),
            category=Category.parse(data.get("category"), default=Category.ENTERTAINMENT),
            description=_text(data.get("description")),
            stream_url=_text(data.get("streamUrl")),
            stream_type=_stream_hint(data.get("streamType")),
            logo_url=_optional_text(data.get("logoUrl")),
            website_url=_optional_text(data.get("websiteUrl")),
            rss_url=_optional_text(data.get("rssUrl")),
            youtube_channel_id=_optional_text(data.get("youtubeChannelId")),
            is_live=bool(data.get("isLive", True)),
            is_user_added=bool(data.get("isUserAdded", False)),
            order=_optional_int(data.get("order")),
            rating=min(max(rating, 0), MAX_RATING),
            view_count=max(view_count, 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the persisted JSON shape."""
        data = {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "description": self.description,
            "streamUrl": self.stream_url,
            "isLive": self.is_live,
            "isUserAdded": self.is_user_added,
            "rating": self.rating,
            "viewCount": self.view_count,
        }
        optional = {
            "streamType": self.stream_type.value if self.stream_type else None,
            "logoUrl": self.logo_url,
            "websiteUrl": self.website_url,
            "rssUrl": self.rss_url,
            "youtubeChannelId": self.youtube_channel_id,
            "order": self.order,
        }
        data.update({key: value for key, value in optional.items() if value is not None})
        return data

    def __repr__(self):
        return f"<Channel(id='{self.id}', name='{self.name}', order={self.order})>"
