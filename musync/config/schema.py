# Musync Configuration Schema
# Pydantic models for YAML configuration validation

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class ConversionErrorPolicy(str, Enum):
    """What to do when the transcoder exits non-zero."""

    SKIP = "skip"
    ABORT = "abort"


class CollisionPolicy(str, Enum):
    """What to do when distinct source files share a fingerprint."""

    KEEP_FIRST = "keep_first"
    FAIL = "fail"


class TranscoderConfig(BaseModel):
    """External transcoder settings."""

    executable: str = Field(default="ffmpeg", description="Transcoder executable name or path")


class OutputConfig(BaseModel):
    """Output configuration."""

    verbose: bool = Field(default=False, description="Enable verbose output")
    colored: bool = Field(default=True, description="Enable colored output")


class MusyncConfig(BaseModel):
    """Root configuration model for musync."""

    jobs: int = Field(default=16, ge=1, description="Maximum number of concurrent conversions")
    bitrate: int = Field(default=256, ge=8, le=512, description="Target bitrate in kbps")
    state_file: str = Field(default=".musync", description="State file name in the destination root")
    hash_prefix_bytes: int = Field(default=1024 * 1024, ge=1, description="Leading bytes hashed per file")
    target_extension: str = Field(default="mp3", description="Extension of destination files")
    convert_extensions: list[str] = Field(
        default_factory=lambda: ["aiff", "flac", "ogg", "mod", "xm", "m4a"],
        description="Source extensions that are transcoded",
    )
    on_conversion_error: ConversionErrorPolicy = Field(
        default=ConversionErrorPolicy.SKIP, description="Policy for failed conversions"
    )
    on_hash_collision: CollisionPolicy = Field(
        default=CollisionPolicy.KEEP_FIRST, description="Policy for fingerprint collisions"
    )
    transcoder: TranscoderConfig = Field(default_factory=TranscoderConfig, description="Transcoder settings")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output settings")

    @field_validator("target_extension")
    @classmethod
    def strip_target_dot(cls, v: str) -> str:
        """Accept extensions written with a leading dot."""
        v = v.lstrip(".")
        if not v:
            raise ValueError("target_extension must not be empty")
        return v

    @field_validator("convert_extensions")
    @classmethod
    def strip_convert_dots(cls, v: list[str]) -> list[str]:
        """Accept extensions written with a leading dot."""
        return [ext.lstrip(".") for ext in v if ext.lstrip(".")]

    @field_validator("state_file")
    @classmethod
    def plain_file_name(cls, v: str) -> str:
        """The state file lives directly in the destination root."""
        if not v or "/" in v or "\\" in v:
            raise ValueError("state_file must be a plain file name")
        return v
