from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised at startup when static configuration is malformed or incomplete."""


class Settings(BaseSettings):
    app_name: str = "press-gateway"
    environment: str = "dev"
    database_url: str | None = None
    database_pool_min_size: int = 1
    database_pool_max_size: int = 10
    database_command_timeout_seconds: float = 15.0
    merge_config_path: str | None = None
    categories_config_path: str | None = None
    author_id_salt: str | None = "author"
    article_id_salt: str | None = "article"
    id_min_length: int = 10
    default_page_size: int = 20
    max_page_size: int = 100
    media_base_url: str = "https://cms.studentnewspaper.org"
    editorial_url: str | None = None
    editorial_token: str | None = None
    editorial_timeout_seconds: float = 10.0
    log_level: str = "INFO"
    otel_enabled: bool = True
    otel_service_name: str = "press-gateway"
    otel_exporter_otlp_endpoint: str | None = None
    otel_exporter_otlp_headers: str | None = None
    otel_trace_sample_ratio: float = 1.0
    otel_excluded_urls: str = "healthz"

    model_config = SettingsConfigDict(env_prefix="GW_", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
