"""Application configuration using Pydantic v2 Settings.

Centralized configuration that loads from environment variables
and provides type-safe access throughout the application.
"""

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults and can be overridden via
    environment variables or a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Remote contracts API
    api_base_url: str = Field(
        default="http://localhost:3000/api",
        description="Base URL of the contracts backend (templates and drafts).",
    )
    api_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for requests to the contracts backend.",
    )

    # Strategy Selection
    renderer_type: str = Field(
        default="inline",
        description="Renderer strategy to use: 'inline' or 'preview'.",
    )
    contract_store_type: str = Field(
        default="memory",
        description="Contract store strategy to use: 'memory' or 'http'.",
    )

    # Editor behaviour
    autosave_delay_seconds: float = Field(
        default=3.0,
        ge=0,
        description="Debounce delay before an edited draft is saved.",
    )
    additional_clauses_heading: str = Field(
        default="CLÁUSULAS ADICIONALES",
        description="Heading of the section that lists selected optional clauses.",
    )

    # Price display
    currency_symbol: str = Field(default="$", description="Currency symbol for prices.")
    thousands_separator: str = Field(default=".", description="Thousands separator for prices.")

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR.",
    )
    log_dir: Path = Field(
        default=Path("./logs"),
        description="Directory for info.log and error.log.",
    )

    @field_validator("log_dir")
    @classmethod
    def ensure_log_dir(cls, v: Path) -> Path:
        """Ensure log directory exists."""
        v.mkdir(parents=True, exist_ok=True)
        return v.resolve()

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        return v.upper()

    @field_validator("renderer_type", "contract_store_type")
    @classmethod
    def normalize_strategy(cls, v: str) -> str:
        """Normalize strategy names to lowercase."""
        return v.strip().lower()

    def configure_logging(self) -> None:
        """Configure global logging based on settings."""
        import structlog

        level = getattr(logging, self.log_level, logging.INFO)

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
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
