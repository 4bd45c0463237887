"""Application configuration management via pydantic-settings.

Centralize all configuration parameters for the Hello node service. Load
settings from environment variables and/or a `.env` file. The resulting
`Settings` object is the environment snapshot handed to the application
factory; request handlers never read `os.environ` directly.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

UNKNOWN_POD = "unknown"


class Settings(BaseSettings):
    """Application-wide configuration settings.

    Attributes:
        PROJECT_NAME: Display name for the application.
        VERSION: Semantic version string.
        ENVIRONMENT: Deployment environment identifier.
        LOG_LEVEL: Minimum logging verbosity level.
        LOGGING_NOISY_MODULES: Third-party loggers pinned to WARNING.
        HOST: Address the listening socket binds to.
        PORT: Port the listening socket binds to.
        POD_NAME: Pod identity reported by the greeting endpoint.
        METRICS_ENABLED: Expose `/metrics` and register default collectors.
        METRICS_COLLECT_INTERVAL_MS: Sampling interval of the periodic collectors.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # ==========================================================================
    # PROJECT METADATA
    # ==========================================================================
    PROJECT_NAME: str = "Hello node"
    VERSION: str = "0.1.0"

    # ==========================================================================
    # ENVIRONMENT & LOGGING
    # ==========================================================================
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"
    LOG_LEVEL: Literal["debug", "info", "warning", "error", "critical"] = "info"
    LOGGING_NOISY_MODULES: list[str] = [
        "uvicorn.access",
        "uvicorn.error",
        "httpx",
        "httpcore",
        "asyncio",
    ]

    # ==========================================================================
    # HTTP LISTENER
    # ==========================================================================
    HOST: str = "0.0.0.0"
    PORT: int = Field(default=3000, ge=1, le=65535)

    # ==========================================================================
    # POD IDENTITY
    # ==========================================================================
    # Injected by the Kubernetes downward API.
    POD_NAME: str = UNKNOWN_POD

    # ==========================================================================
    # METRICS
    # ==========================================================================
    METRICS_ENABLED: bool = True
    METRICS_COLLECT_INTERVAL_MS: int = Field(default=5000, gt=0)

    @field_validator("POD_NAME", mode="before")
    @classmethod
    def default_blank_pod_name(cls, v: object) -> object:
        """Treat an empty or whitespace-only POD_NAME as unset.

        Args:
            v: Raw POD_NAME value from the environment or constructor.

        Returns:
            The original value, or the `unknown` sentinel when blank.
        """
        if v is None or (isinstance(v, str) and not v.strip()):
            return UNKNOWN_POD
        return v


# ==============================================================================
# DEPENDENCY INJECTION
# ==============================================================================


@lru_cache()
def get_settings() -> Settings:
    """Return a cached singleton instance of the application settings.

    Returns:
        The singleton Settings instance.

    Example:
        >>> app = create_app(get_settings())
    """
    return Settings()
