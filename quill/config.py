"""Configuration management for Quill using Pydantic Settings."""

from typing import Annotated

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Article store (CRUD service) settings
    api_base_url: str = Field(
        default="http://localhost:5000/api",
        validation_alias=AliasChoices("api_base_url", "api_url"),
        description="Base URL of the article CRUD API (without /articles)",
    )

    # Search API settings
    google_api_key: SecretStr | None = Field(
        default=None,
        description="Google Custom Search API key",
    )
    google_cx: str | None = Field(
        default=None,
        description="Google Custom Search engine id",
    )
    blocked_reference_domains: Annotated[list[str], NoDecode] = Field(
        default=["youtube.com", "facebook.com"],
        description="Domains never used as references (substring match)",
    )

    # Generation API settings (any OpenAI-compatible endpoint)
    generation_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("generation_api_key", "groq_api_key"),
        description="API key for the text generation service",
    )
    generation_base_url: str = Field(
        default="https://api.groq.com/openai/v1",
        description="Base URL of the OpenAI-compatible generation endpoint",
    )
    generation_model: str = Field(
        default="llama-3.3-70b-versatile",
        description="Chat model used to rewrite articles",
    )
    generation_max_tokens: int = Field(
        default=4000,
        gt=0,
        description="Maximum output tokens per rewrite",
    )
    generation_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for rewrites",
    )

    # Target site settings
    site_origin: str = Field(
        default="https://beyondchats.com",
        description="Origin used to absolutise relative links and images",
    )
    listing_url: str = Field(
        default="https://beyondchats.com/blogs/",
        description="Listing page the harvester starts from",
    )

    # Fetcher settings
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="Browser-like User-Agent sent with every fetch",
    )
    direct_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Timeout for direct HTTP fetches",
    )
    render_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Navigation timeout for headless renders",
    )
    render_settle_seconds: float = Field(
        default=2.0,
        ge=0,
        description="Fixed wait after navigation so deferred content can populate",
    )

    # Pacing settings
    inter_reference_delay: float = Field(default=1.0, ge=0)
    inter_link_delay: float = Field(default=1.0, ge=0)
    inter_article_delay: float = Field(default=3.0, ge=0)
    warm_up_delay: float = Field(default=2.0, ge=0)

    skip_already_enhanced: bool = Field(
        default=False,
        description="Skip originals that already have an enhanced record",
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    environment: str = Field(
        default="development",
        description="Environment (development or production)",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("blocked_reference_domains", mode="before")
    @classmethod
    def parse_blocked_domains(cls, v: str | list[str]) -> list[str]:
        """Parse blocked domains from comma-separated string or list."""
        if isinstance(v, str):
            return [domain.strip() for domain in v.split(",") if domain.strip()]
        return v

    @field_validator("api_base_url", "site_origin", "generation_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalise base URLs so paths can be appended with a single slash."""
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed_levels:
            raise ValueError(
                f"Invalid log_level: {v}. Allowed values: {', '.join(sorted(allowed_levels))}"
            )
        return v.upper()

    def missing_enhancement_settings(self) -> list[str]:
        """Return the names of settings the enhancement batch cannot run without."""
        missing = []
        if not self.google_api_key or not self.google_api_key.get_secret_value():
            missing.append("GOOGLE_API_KEY")
        if not self.google_cx:
            missing.append("GOOGLE_CX")
        if not self.generation_api_key or not self.generation_api_key.get_secret_value():
            missing.append("GENERATION_API_KEY")
        return missing


# Global settings instance
settings = Settings()
