"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    api_token: str
    openfoodfacts_base_url: str = "https://world.openfoodfacts.org/api/v2"
    openfoodfacts_search_url: str = "https://world.openfoodfacts.org/cgi/search.pl"
    openfoodfacts_user_agent: str = "food-suggest/0.1 (nutrition suggestions)"
    remote_timeout_seconds: float = 5.0
    remote_search_cache_ttl_seconds: float = 300.0
    remote_search_cache_limit: int = 50
    remote_search_timeout_seconds: float = 0.4
    barcode_cache_ttl_seconds: float = 21600.0
    barcode_cache_limit: int = 250
    client_cache_ttl_seconds: float = 120.0
    client_cache_limit: int = 50
    client_request_timeout_seconds: float = 0.7
    typeahead_debounce_seconds: float = 0.25
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
