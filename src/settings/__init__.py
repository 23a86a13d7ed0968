"""Feed settings loading."""

from .app import FeedSettings, get_settings


__all__ = ["FeedSettings", "get_settings"]
