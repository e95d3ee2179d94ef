"""Application settings loading."""

from .app import TrackerSettings, get_settings


__all__ = ["TrackerSettings", "get_settings"]
