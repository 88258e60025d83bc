"""Configuration for parcelscope."""

from parcelscope.settings.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
