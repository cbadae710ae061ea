# MirrorSync Configuration Schema
# Pydantic models for YAML configuration validation

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class SyncSettings(BaseModel):
    """Traversal engine settings."""

    handler_timeout: Optional[float] = Field(
        default=None, gt=0, description="Seconds to wait on a single expansion. None = no limit."
    )
    exclude: list[str] = Field(
        default_factory=lambda: [".DS_Store", "*.swp", "*~", ".git", "__pycache__"],
        description="Glob patterns skipped by the local directory handler",
    )


class TumblrConfig(BaseModel):
    """Tumblr API settings, injected into the Tumblr handler."""

    api_host: str = Field(default="https://api.tumblr.com", description="Base URL of the Tumblr API")
    api_key: str = Field(default="", description="OAuth consumer key used as api_key")
    blogs: list[str] = Field(default_factory=list, description="Blogs mirrored when syncing the API root")
    page_size: int = Field(default=20, ge=1, le=50, description="Posts fetched per request")
    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")

    @field_validator("api_host")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the API host."""
        return v.rstrip("/")


class OutputConfig(BaseModel):
    """Output and logging configuration."""

    verbose: bool = Field(default=False, description="Enable verbose output")
    colored: bool = Field(default=True, description="Enable colored output")
    log_file: Optional[str] = Field(default=None, description="Path to log file")

    @field_validator("log_file")
    @classmethod
    def expand_optional_path(cls, v: Optional[str]) -> Optional[str]:
        """Expand ~ in optional paths."""
        if v is None:
            return None
        return str(Path(v).expanduser())


class MirrorConfig(BaseModel):
    """Root configuration model for mirrorsync."""

    destination: str = Field(
        default="~/mirror", validate_default=True, description="Default local destination root"
    )
    sync: SyncSettings = Field(default_factory=SyncSettings, description="Engine settings")
    tumblr: TumblrConfig = Field(default_factory=TumblrConfig, description="Tumblr handler settings")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output settings")

    @field_validator("destination")
    @classmethod
    def expand_destination(cls, v: str) -> str:
        """Expand ~ in destination."""
        return str(Path(v).expanduser())
