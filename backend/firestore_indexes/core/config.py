"""Configuration settings for firestore_indexes.

Values are read from environment variables prefixed with ``FIRESTORE_INDEXES_``
(or a local ``.env`` file) and exposed through the module-level ``settings``.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings for talking to the Firestore Admin API.

    Attributes:
        FIRESTORE_API_ORIGIN: Base origin of the Firestore REST API
        FIRESTORE_API_VERSION: API version segment prepended to every resource path
        ACCESS_TOKEN: Optional OAuth bearer token sent with every request
        REQUEST_TIMEOUT: Per-request timeout in seconds
        MAX_RETRIES: Attempts per request before a transient failure surfaces
        MAX_CONCURRENT_REQUESTS: Upper bound on in-flight create/patch calls
        LOG_LEVEL: Root level for the package logger
        LOCAL_DEVELOPMENT: Render logs without context dimensions when true
    """

    model_config = SettingsConfigDict(
        env_prefix="FIRESTORE_INDEXES_",
        env_file=".env",
        extra="ignore",
        case_sensitive=True,
    )

    FIRESTORE_API_ORIGIN: str = "https://firestore.googleapis.com"
    FIRESTORE_API_VERSION: str = "v1beta2"
    ACCESS_TOKEN: Optional[str] = None

    REQUEST_TIMEOUT: float = Field(default=30.0, gt=0)
    MAX_RETRIES: int = Field(default=3, ge=1)
    MAX_CONCURRENT_REQUESTS: int = Field(default=10, gt=0)

    LOG_LEVEL: str = "INFO"
    LOCAL_DEVELOPMENT: bool = False

    @field_validator("FIRESTORE_API_ORIGIN")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the origin so paths can be joined with a single slash."""
        return v.rstrip("/")

    @field_validator("LOG_LEVEL")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        """Accept lower-case level names."""
        return v.upper()

    @property
    def api_base_url(self) -> str:
        """Get the versioned API base URL."""
        return f"{self.FIRESTORE_API_ORIGIN}/{self.FIRESTORE_API_VERSION}"


settings = Settings()
