"""Engine configuration using Pydantic v2 Settings.

Centralized configuration that loads from environment variables
and provides type-safe access throughout the engine.
"""

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Engine settings loaded from environment variables.

    All settings have sensible defaults and can be overridden via
    ``BLOCKDOC_``-prefixed environment variables or a .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="BLOCKDOC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Documents
    schema_version: str = Field(
        default="builder-v1",
        description="Schema marker written into new templates and accepted on load.",
    )

    # Rendering
    sample_text: str = Field(
        default="Sample text",
        description="Generic text shown by leaves that are not bound to a field.",
    )
    repeat_placeholder_label: str = Field(
        default="Repeat block",
        description="Label of the neutral block shown for repeats in the builder preview.",
    )

    # Strategy Selection
    renderer_type: str = Field(
        default="document",
        description="Renderer strategy to use: 'preview' or 'document'.",
    )
    store_type: str = Field(
        default="memory",
        description="Template store strategy to use: 'memory'.",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR.",
    )
    log_json: bool = Field(
        default=False,
        description="Render structured logs as JSON instead of console text.",
    )
    log_dir: Path | None = Field(
        default=None,
        description="Optional directory for info.log and error.log files.",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        return v.upper()

    @field_validator("log_dir")
    @classmethod
    def resolve_log_dir(cls, v: Path | None) -> Path | None:
        """Resolve the log directory to an absolute path."""
        return v.resolve() if v is not None else None

    def configure_logging(self) -> None:
        """Configure global logging based on settings."""
        import structlog

        level = getattr(logging, self.log_level, logging.INFO)
        renderer = (
            structlog.processors.JSONRenderer()
            if self.log_json
            else structlog.dev.ConsoleRenderer(colors=False)
        )

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                renderer,
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        logging.basicConfig(
            format="%(message)s",
            level=level,
        )

        logger.setLevel(level)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global Settings instance.

    Returns:
        The singleton Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        _settings.configure_logging()
    return _settings
