from functools import cached_property, lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from codegraph_relations.infra.config.groups import (
    ExtractionConfig,
    FilterConfig,
    ObservabilityConfig,
    ProcessingConfig,
)


class Settings(BaseSettings):
    """
    Relation extractor settings.

    Environment variables use the CODEGRAPH_RELATIONS_ prefix.
    Example: CODEGRAPH_RELATIONS_MAX_WORKERS, CODEGRAPH_RELATIONS_NOISE_LEVEL

    Grouped access:
        settings.extraction     # ExtractionConfig
        settings.processing     # ProcessingConfig
        settings.filter         # FilterConfig
        settings.observability  # ObservabilityConfig
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CODEGRAPH_RELATIONS_",
        extra="ignore",
    )

    # ========================================================================
    # Grouped Config Accessors
    # ========================================================================

    @cached_property
    def extraction(self) -> ExtractionConfig:
        """Extraction behaviour group."""
        return ExtractionConfig(
            known_external_types=[t.strip() for t in self.known_external_types.split(",") if t.strip()],
            emit_synthetic_members=self.emit_synthetic_members,
            emit_type_args=self.emit_type_args,
            infer_var_types=self.infer_var_types,
        )

    @cached_property
    def processing(self) -> ProcessingConfig:
        """Batch processing group."""
        return ProcessingConfig(max_workers=self.max_workers, language=self.language)

    @cached_property
    def filter(self) -> FilterConfig:
        """Noise filter group."""
        return FilterConfig(noise_level=self.noise_level)

    @cached_property
    def observability(self) -> ObservabilityConfig:
        """Logging group."""
        return ObservabilityConfig(log_level=self.log_level, log_format=self.log_format)

    # ========================================================================
    # Extraction
    # ========================================================================
    known_external_types: str = ""  # comma separated FQNs, e.g. "org.slf4j.Logger,com.google.common.base.Preconditions"
    emit_synthetic_members: bool = True
    emit_type_args: bool = True
    infer_var_types: bool = True

    # ========================================================================
    # Processing
    # ========================================================================
    max_workers: int = 4
    language: str = "java"

    # ========================================================================
    # Filtering
    # ========================================================================
    noise_level: str = "raw"  # raw | balanced | pure

    # ========================================================================
    # Observability
    # ========================================================================
    log_level: str = "INFO"
    log_format: str = "console"


# Eager loading (module-level instantiation)
settings = Settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance"""
    return settings
