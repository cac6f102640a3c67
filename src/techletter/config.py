"""Configuration loading for Techletter."""

from functools import lru_cache

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from techletter.errors import ConfigurationError
from techletter.utils.logging import get_logger
from techletter.utils.secrets import get_secret_manager

logger = get_logger(__name__)

ENV_PREFIX = "TECHLETTER_"

# Settings field -> Secret Manager secret ID
REQUIRED_SECRETS = {
    "firecrawl_api_key": "firecrawl-api-key",
    "azure_api_key": "azure-api-key",
    "azure_endpoint": "azure-endpoint",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables and ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Required secrets, checked by load_settings()
    firecrawl_api_key: str | None = Field(default=None, description="Firecrawl API key")
    azure_api_key: str | None = Field(default=None, description="Azure OpenAI API key")
    azure_endpoint: str | None = Field(
        default=None,
        description="Full Azure OpenAI chat-completions URL, including api-version",
    )

    # Extraction settings
    firecrawl_api_url: str = Field(
        default="https://api.firecrawl.dev/v1", description="Firecrawl API base URL"
    )
    source_domain: str = Field(
        default="techcrunch.com", description="Domain every submitted URL must belong to"
    )
    source_name: str = Field(default="TechCrunch", description="Display name of the source site")

    # Generation settings
    max_tokens: int = Field(default=1500, gt=0, description="Maximum tokens in the newsletter")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")
    max_content_chars: int | None = Field(
        default=None, gt=0, description="Truncate article bodies longer than this"
    )

    # Application settings
    request_timeout: float = Field(default=60.0, gt=0, description="HTTP timeout in seconds")
    max_sessions: int = Field(
        default=1000, gt=0, description="Visitor sessions kept before the oldest is dropped"
    )
    gcp_project_id: str | None = Field(
        default=None, description="Project to read missing secrets from Secret Manager"
    )
    log_level: str = Field(default="INFO", description="Logging level")
    json_logs: bool = Field(default=True, description="Emit JSON log lines")

    @field_validator("firecrawl_api_key", "azure_api_key", "azure_endpoint", "gcp_project_id")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat blank values as unset."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("azure_endpoint")
    @classmethod
    def validate_azure_endpoint(cls, v: str | None) -> str | None:
        """Validate the Azure endpoint is an HTTP(S) URL."""
        if v is not None and not v.startswith(("https://", "http://")):
            raise ValueError(
                f"{ENV_PREFIX}AZURE_ENDPOINT '{v}' must be an http(s) URL."
            )
        return v

    @field_validator("source_domain")
    @classmethod
    def normalize_source_domain(cls, v: str) -> str:
        """Lower-case the source domain so matching is case-insensitive."""
        if not v or not v.strip():
            raise ValueError(f"{ENV_PREFIX}SOURCE_DOMAIN must not be empty.")
        return v.strip().lower()

    @property
    def default_title(self) -> str:
        """Title used when the scraped page carries none."""
        return f"{self.source_name} Article"

    def missing_secrets(self) -> list[str]:
        """Return the names of required secrets that are still unset."""
        return [field for field in REQUIRED_SECRETS if getattr(self, field) is None]


def _fill_from_secret_manager(settings: Settings) -> Settings:
    """Look up unset secrets in Secret Manager when a project is configured."""
    missing = settings.missing_secrets()
    if not missing or settings.gcp_project_id is None:
        return settings

    secret_manager = get_secret_manager(settings.gcp_project_id)
    found = {}
    for field in missing:
        value = secret_manager.get_secret(REQUIRED_SECRETS[field])
        if value is not None:
            found[field] = value
    if not found:
        return settings
    return Settings(**{**settings.model_dump(), **found})


def load_settings() -> Settings:
    """Build settings and fail fast when a required secret is missing.

    Returns:
        Fully validated Settings.

    Raises:
        ConfigurationError: If a value is invalid or a required secret is missing.
    """
    try:
        settings = _fill_from_secret_manager(Settings())
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    missing = settings.missing_secrets()
    if missing:
        names = ", ".join(f"{ENV_PREFIX}{field.upper()}" for field in missing)
        logger.error("Missing required secrets", missing=names)
        raise ConfigurationError(
            f"Missing required environment variables: {names}. "
            "Please check your .env file."
        )
    return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached, validated application settings."""
    return load_settings()
