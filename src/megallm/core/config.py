from __future__ import annotations
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, AliasChoices, SecretStr
from functools import lru_cache
from typing import Optional

class Settings(BaseSettings):
    # API
    app_name: str = Field(
        default="megallm-catalog",
        validation_alias=AliasChoices("APP_NAME"),
    )
    environment: str = Field(default="local", validation_alias=AliasChoices("DEPLOYMENT_ENV"))
    api_prefix: str = Field(default="/api", validation_alias=AliasChoices("API_PREFIX"))
    enable_cors: bool = Field(default=True, validation_alias=AliasChoices("ENABLE_CORS"))
    api_host: str = Field(default="0.0.0.0", validation_alias=AliasChoices("API_HOST"))
    api_port: int = Field(default=8000, validation_alias=AliasChoices("API_PORT"))

    log_level: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL"))

    # ⚠️ inject from runtime only (.env or runtime)
    modelhub_api_key: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices("MEGALLM_API_KEY"),
        description="Bearer credential sent to the upstream models endpoint",
    )
    modelhub_models_url: str = Field(
        default="https://ai.megallm.io/v1/models",
        validation_alias=AliasChoices("MEGALLM_MODELS_URL", "MODELHUB_MODELS_URL"),
        description="Upstream endpoint listing available models",
    )
    modelhub_timeout: float = Field(
        default=15.0,
        validation_alias=AliasChoices("MEGALLM_TIMEOUT", "MODELHUB_TIMEOUT"),
        description="Seconds before an upstream models request is abandoned.",
    )

    # Catalog presentation
    catalog_refresh_interval: float = Field(
        default=30.0,
        validation_alias=AliasChoices("CATALOG_REFRESH_INTERVAL"),
        description="Seconds between automatic catalog refreshes while auto-refresh is enabled.",
    )

    # Site shell consumed by the documentation renderer
    site_title: str = Field(default="MegaLLM", validation_alias=AliasChoices("SITE_TITLE"))
    site_logo: str = Field(default="/logo.png", validation_alias=AliasChoices("SITE_LOGO"))
    docs_url: str = Field(default="/docs", validation_alias=AliasChoices("DOCS_URL"))
    dashboard_url: str = Field(
        default="https://megallm.io",
        validation_alias=AliasChoices("DASHBOARD_URL"),
        description="External dashboard linked from the nav bar",
    )
    openapi_spec_path: str = Field(
        default="openapi.yaml",
        validation_alias=AliasChoices("OPENAPI_SPEC_PATH"),
        description="Static OpenAPI document fed to the API reference page generator.",
    )

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

@lru_cache
def get_settings():
    return Settings()
