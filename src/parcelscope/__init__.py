"""parcelscope: parcel tracking lookups via headless-browser response interception."""

from __future__ import annotations

try:
    from importlib.metadata import version

    __version__ = version("parcelscope")
except Exception:
    __version__ = "0.0.0"
