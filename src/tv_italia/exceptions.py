"""Catalog exceptions for TV Italia."""


class CatalogError(Exception):
    """Base class for catalog errors."""


class CatalogCorruptError(CatalogError):
    """Raised when the persisted catalog blob cannot be decoded."""


class ChannelNotFoundError(CatalogError, KeyError):
    """Raised when a channel id is not in the catalog."""

    def __init__(self, channel_id: str):
        super().__init__(f"Channel '{channel_id}' not found")
        self.channel_id = channel_id

    def __str__(self):
        return self.args[0]


class ChannelValidationError(CatalogError, ValueError):
    """Raised when administrator input for a channel is invalid."""
