from functools import lru_cache
from typing import List, Optional

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from prompt_relay.domain.errors import ConfigurationMissing


class Settings(BaseSettings):
    # Core app settings
    app_name: str = Field(default="Prompt Relay Service", alias="PROMPT_RELAY_APP_NAME")
    environment: str = Field(default="local", alias="PROMPT_RELAY_ENVIRONMENT")  # local, dev, prod

    # Upstream OpenAI provider
    openai_api_key: SecretStr = Field(alias="OPENAI_API_KEY")
    openai_model: str = Field(default="gpt-4o-mini", alias="OPENAI_MODEL")
    openai_base_url: Optional[str] = Field(default=None, alias="OPENAI_BASE_URL")

    # Relay limits
    upstream_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        alias="PROMPT_RELAY_UPSTREAM_TIMEOUT_SECONDS",
    )
    max_prompt_chars: int = Field(default=8000, gt=0, alias="PROMPT_RELAY_MAX_PROMPT_CHARS")

    # Browser callers
    cors_allow_origins: List[str] = Field(
        default_factory=lambda: ["*"],
        alias="PROMPT_RELAY_CORS_ALLOW_ORIGINS",
    )

    # Datadog LLM Observability switch
    llmobs_enabled: bool = Field(default=False, alias="PROMPT_RELAY_LLMOBS_ENABLED")

    # # Use env variables only, no .env by default
    model_config = SettingsConfigDict(env_file=None, case_sensitive=True, populate_by_name=True)

    @field_validator("openai_api_key")
    @classmethod
    def _reject_blank_key(cls, value: SecretStr) -> SecretStr:
        # # A whitespace-only key is as good as no key
        if not value.get_secret_value().strip():
            raise ValueError("OPENAI_API_KEY must not be blank")
        return value


class RelayClientSettings(BaseSettings):
    # Deployment exposing the relay endpoint, no placeholder fallback
    relay_base_url: str = Field(alias="PROMPT_RELAY_BASE_URL")
    relay_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        alias="PROMPT_RELAY_CLIENT_TIMEOUT_SECONDS",
    )

    model_config = SettingsConfigDict(env_file=None, case_sensitive=True, populate_by_name=True)

    @field_validator("relay_base_url")
    @classmethod
    def _reject_blank_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("PROMPT_RELAY_BASE_URL must not be blank")
        return value.rstrip("/")


def _missing_fields(exc: ValidationError) -> List[str]:
    # # Name offending env vars without echoing their values
    names: List[str] = []
    for error in exc.errors():
        loc = error.get("loc") or ()
        if loc:
            names.append(str(loc[0]))
    return names


@lru_cache()
def get_settings() -> Settings:
    # # Cached settings instance, loaded once per process
    try:
        return Settings()  # type: ignore[call-arg]
    except ValidationError as exc:
        raise ConfigurationMissing(
            f"Invalid or missing relay configuration: {_missing_fields(exc)}"
        ) from None


@lru_cache()
def get_client_settings() -> RelayClientSettings:
    # # Cached client settings, resolved once per process
    try:
        return RelayClientSettings()  # type: ignore[call-arg]
    except ValidationError as exc:
        raise ConfigurationMissing(
            f"Invalid or missing relay client configuration: {_missing_fields(exc)}"
        ) from None
