"""Configuration management for mediafetch."""

from functools import lru_cache
from typing import List
from urllib.parse import urlparse

from pydantic import NonNegativeInt, PositiveInt, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Catalog mirrors, tried in order. Each entry is a base URL ending in "/".
    movies_api_urls: List[str] = [
        "https://movies-v2.api-fetch.sh/",
        "https://movies-v2.api-fetch.am/",
        "https://movies-v2.api-fetch.website/",
    ]
    tv_api_urls: List[str] = [
        "https://tv-v2.api-fetch.sh/",
        "https://tv-v2.api-fetch.am/",
        "https://tv-v2.api-fetch.website/",
    ]
    anime_api_urls: List[str] = [
        "https://anime.api-fetch.sh/",
        "https://anime.api-fetch.website/",
    ]
    yts_api_urls: List[str] = ["https://yts.mx/api/v2/", "https://yts.ag/api/v2/"]

    # Network settings
    request_timeout: PositiveInt = 10  # Per-request timeout in seconds
    requests_per_minute: PositiveInt = 60  # Request budget per transport
    # Proxy configuration in the format http://host:port or socks5://host:port
    proxy: str | None = None

    # Provider settings
    provider_timeout: PositiveInt = 30  # Timeout for a provider during search fan-out
    detail_cache_ttl: NonNegativeInt = 1800  # Seconds a fetched detail is reused
    lang_code: str = "en"

    # Search settings
    search_delay_ms: NonNegativeInt = 300  # Quiet period before a query is dispatched
    search_min_query_length: NonNegativeInt = 3  # Typed queries must be longer than this

    @field_validator("proxy")
    @classmethod
    def validate_proxy(cls, v: str | None) -> str | None:
        if v is None:
            return v

        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https", "socks4", "socks5", "socks5h"):
            raise ValueError(
                "Proxy must be a valid URL with scheme http/https/socks4/socks5/socks5h"
            )
        if not parsed.netloc:
            raise ValueError("Proxy must have a host and port")
        return v

    @field_validator("movies_api_urls", "tv_api_urls", "anime_api_urls", "yts_api_urls")
    @classmethod
    def validate_mirrors(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("At least one mirror URL is required")
        return [url if url.endswith("/") else f"{url}/" for url in v]

    # App settings
    debug: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
