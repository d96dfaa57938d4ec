"""TV Italia: live channel catalog and playback."""

__version__ = "0.1.0"
