"""
The Hillside Echo Client - Configuration Module
===============================================
All configuration is loaded from environment variables (prefix HILLSIDE_)
and an optional .env file.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Client settings loaded from environment variables and .env."""

    # App
    app_name: str = "The Hillside Echo"
    app_env: str = "development"

    # Backend
    api_origin: str = "http://localhost:8000"
    api_prefix: str = "/api"
    csrf_cookie_path: str = "/sanctum/csrf-cookie"
    xsrf_cookie_name: str = "XSRF-TOKEN"
    xsrf_header_name: str = "X-XSRF-TOKEN"
    request_timeout_seconds: float = 30.0
    default_per_page: int = 10

    @property
    def api_base_url(self) -> str:
        return f"{self.api_origin.rstrip('/')}{self.api_prefix}"

    @property
    def csrf_cookie_url(self) -> str:
        return f"{self.api_origin.rstrip('/')}{self.csrf_cookie_path}"

    # Polling (seconds)
    dashboard_poll_seconds: int = 10
    security_poll_seconds: int = 15
    analytics_poll_seconds: int = 30
    inbox_poll_seconds: int = 30
    profile_poll_seconds: int = 30
    home_poll_seconds: int = 60

    # Print-media viewer
    viewer_min_scale: float = 0.4
    viewer_max_scale: float = 2.5
    viewer_default_scale: float = 1.0
    viewer_scale_step: float = 0.1
    viewer_book_scale: float = 0.7

    # Dev proxy
    proxy_host: str = "127.0.0.1"
    proxy_port: int = 5173
    proxy_target: str = "http://localhost:8000"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        env_prefix = "HILLSIDE_"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()
