"""
Data Models Layer.

This package contains Pydantic models that define the core data structures
used throughout the application, such as track records, configuration and
export summaries.
"""

from .config import VaultConfig
from .summary import ExportSummary
from .track import ExportedTrack, TrackRecord

__all__ = ["ExportSummary", "ExportedTrack", "TrackRecord", "VaultConfig"]
