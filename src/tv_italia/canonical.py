"""System channels shipped with TV Italia.

These are the canonical templates merged into the persisted catalog on
every load. Their descriptive fields are not user-editable; only rating,
view count and order survive from the persisted copy.
"""

from .channel import Category, Channel
from .classifier import DeliveryMode

# Always shown first and second, whatever their order key says.
# The first one is also the featured channel on the home view.
PINNED_FIRST_ID = "stiletv"
PINNED_SECOND_ID = "settv"

SYSTEM_CHANNELS = (
    Channel(
        id="stiletv",
        name="StileTV",
        category=Category.ENTERTAINMENT,
        description="Intrattenimento, moda e attualità in diretta dalla Campania.",
        logo_url="https://www.stiletv.it/images/logo.png",
        stream_url="https://stream.stiletv.it/live/stiletv/index.m3u8",
        stream_type=DeliveryMode.ADAPTIVE_STREAM,
        website_url="https://www.stiletv.it",
        rss_url="https://www.stiletv.it/feed",
        order=1,
    ),
    Channel(
        id="settv",
        name="SET TV",
        category=Category.LOCAL,
        description="La televisione del territorio: notizie, sport e cultura locale.",
        logo_url="https://www.settv.it/images/logo.png",
        stream_url="https://stream.settv.it/hls/settv/index.m3u8",
        stream_type=DeliveryMode.ADAPTIVE_STREAM,
        website_url="https://www.settv.it",
        order=2,
    ),
    Channel(
        id="rainews24",
        name="RaiNews24",
        category=Category.NEWS,
        description="Il canale all news del servizio pubblico, 24 ore su 24.",
        logo_url="https://www.rainews.it/dl/rainews/images/logo.png",
        stream_url="https://www.rainews.it/notiziari/rainews24/diretta",
        stream_type=DeliveryMode.GENERIC_EMBED,
        website_url="https://www.rainews.it",
        rss_url="https://www.rainews.it/rss/tutti",
        order=3,
    ),
    Channel(
        id="sportitalia",
        name="Sportitalia",
        category=Category.SPORT,
        description="Calcio, mercato e tutto lo sport italiano in diretta.",
        logo_url="https://www.sportitalia.com/images/logo.png",
        stream_url="https://stream.sportitalia.com/live/sportitalia/playlist.m3u8",
        stream_type=DeliveryMode.ADAPTIVE_STREAM,
        website_url="https://www.sportitalia.com",
        order=5,
    ),
    Channel(
        id="radioitaliatv",
        name="Radio Italia TV",
        category=Category.MUSIC,
        description="Solo musica italiana, in video e in diretta.",
        logo_url="https://www.radioitalia.it/images/logo.png",
        stream_url="https://www.youtube.com/watch?v=8bYKwZ6b8yQ",
        stream_type=DeliveryMode.EMBEDDED_VIDEO_PLATFORM,
        website_url="https://www.radioitalia.it",
        youtube_channel_id="UCzAM5Cd6s0h2Z9Sl9UJj0Ew",
        order=6,
    ),
    Channel(
        id="tv2000",
        name="TV2000",
        category=Category.RELIGION,
        description="Informazione, cultura e spiritualità.",
        logo_url="https://www.tv2000.it/images/logo.png",
        stream_url="https://stream.tv2000.it/live/tv2000/index.m3u8",
        stream_type=DeliveryMode.ADAPTIVE_STREAM,
        website_url="https://www.tv2000.it",
        order=8,
    ),
)

SYSTEM_CHANNEL_IDS = frozenset(channel.id for channel in SYSTEM_CHANNELS)
