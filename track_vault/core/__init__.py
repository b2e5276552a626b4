"""
Core application engine.

`ExportPipeline` copies every stored track into a fresh export bundle and
writes its manifests; `TrackUploader` is the ingest side that validates
metadata, stores payloads and appends track records.
"""

from .export_pipeline import ExportPipeline
from .uploader import TrackUploader, UploadRequest

__all__ = ["ExportPipeline", "TrackUploader", "UploadRequest"]
