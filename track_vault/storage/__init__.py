"""
Storage Layer.

This package handles all data persistence: the configuration file, the JSON
track-record store and the content store holding uploaded payloads.
"""

from .config_manager import ConfigManager
from .content_store import ContentStore
from .track_store import TrackStore

__all__ = ["ConfigManager", "ContentStore", "TrackStore"]
