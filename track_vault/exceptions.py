"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class TrackVaultError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(TrackVaultError):
    """Raised for issues related to configuration loading or validation."""


class StorageError(TrackVaultError):
    """Base exception for track store failures."""


class StorageIOError(StorageError):
    """Raised when the track store cannot be written (disk full, permissions)."""


class StorageReadCorruption(StorageError):
    """Raised when the track store document cannot be read or parsed."""


class DuplicateTrackError(StorageError):
    """Raised when appending a record whose ID already exists in the store."""


class ContentStoreError(TrackVaultError):
    """Raised when a payload name cannot be resolved inside the content store."""


class UploadValidationError(TrackVaultError):
    """Raised when an upload request is missing a file or required metadata."""


class ExportError(TrackVaultError):
    """Base exception for export pipeline failures."""


class ExportSetupError(ExportError):
    """Raised when the export container directory cannot be created."""


class ExportWriteError(ExportError):
    """Raised when a manifest file cannot be written to the export container."""


class ExportItemError(ExportError):
    """
    Describes a single track that could not be exported.

    Collected in the export summary; never raised out of an export run.
    """

    def __init__(self, track_id: str, stored_filename: str, reason: str):
        super().__init__(f"{track_id} ({stored_filename}): {reason}")
        self.track_id = track_id
        self.stored_filename = stored_filename
        self.reason = reason
