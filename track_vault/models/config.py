"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DEFAULT_UPLOADS_SUBDIR = "uploads"
DEFAULT_DATABASE_FILE = "db/tracks.json"
DEFAULT_EXPORTS_SUBDIR = "exports"
DEFAULT_LOGS_SUBDIR = "logs"


class VaultConfig(BaseModel):
    """A validated configuration model for the application."""

    # Storage Locations
    data_dir: str
    uploads_dir: str = ""
    database_file: str = ""
    exports_dir: str = ""

    # Upload Settings
    max_upload_mb: int = 100
    max_workers: int = 4

    # Logging
    json_logs: bool = False

    # Internal fields not loaded from INI file
    config_path: str = Field(..., repr=False)

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @field_validator("data_dir")
    @classmethod
    def validate_data_dir(cls, v: str) -> str:
        """Ensures a data directory has been configured."""
        if not v:
            raise ValueError("Data directory cannot be empty. Run 'track-vault init'.")
        return v

    @field_validator("max_upload_mb")
    @classmethod
    def validate_upload_limit(cls, v: int) -> int:
        """Keeps the upload size limit within a sane range."""
        if v < 1 or v > 2048:
            raise ValueError("Max upload size must be between 1 and 2048 MB.")
        return v

    @field_validator("max_workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        """Ensures a reasonable number of workers."""
        if v < 1 or v > 32:
            raise ValueError("Max workers must be between 1 and 32.")
        return v

    def _resolve(self, value: str, default: str) -> Path:
        base = Path(self.data_dir).expanduser()
        if value:
            path = Path(value).expanduser()
            return path if path.is_absolute() else base / path
        return base / default

    @property
    def uploads_path(self) -> Path:
        return self._resolve(self.uploads_dir, DEFAULT_UPLOADS_SUBDIR)

    @property
    def database_path(self) -> Path:
        return self._resolve(self.database_file, DEFAULT_DATABASE_FILE)

    @property
    def exports_path(self) -> Path:
        return self._resolve(self.exports_dir, DEFAULT_EXPORTS_SUBDIR)

    @property
    def logs_path(self) -> Path:
        return Path(self.data_dir).expanduser() / DEFAULT_LOGS_SUBDIR

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path"}
        return {key for key in cls.model_fields if key not in internal_fields}
