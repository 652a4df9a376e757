"""
Configuration groups.

Settings are split into logical groups. Each group is usable on its own and
is assembled by Settings.
"""

from pydantic import BaseModel, Field


class ExtractionConfig(BaseModel):
    """Relation extraction behaviour."""

    known_external_types: list[str] = Field(
        default_factory=list,
        description="Fully qualified external type names used to disambiguate imports",
    )
    emit_synthetic_members: bool = Field(
        default=True, description="Declare implicit constructors, enum and record members"
    )
    emit_type_args: bool = Field(default=True, description="Emit TYPE_ARG relations for generic arguments")
    infer_var_types: bool = Field(default=True, description="Infer `var` locals from their initializer")


class ProcessingConfig(BaseModel):
    """Batch processing settings."""

    max_workers: int = Field(default=4, ge=1, le=64, description="Worker threads per phase")
    language: str = Field(default="java", description="Source language of the batch")


class FilterConfig(BaseModel):
    """Relation noise filtering."""

    noise_level: str = Field(default="raw", description="raw | balanced | pure")


class ObservabilityConfig(BaseModel):
    """Logging settings."""

    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="console", description="json | console")
