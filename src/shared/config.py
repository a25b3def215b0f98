"""Storefront settings, read from the environment (prefix ``STOREFRONT_``) or ``.env``."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_url: str = "http://localhost:5000"
    frontend_url: str = "http://localhost:3000"
    request_timeout: float = 30.0
    environment: str = "development"

    @property
    def backend_base_url(self) -> str:
        """API root with a scheme. Hosting platforms often hand out bare hostnames."""
        url = self.api_url.rstrip("/")
        if url.startswith(("http://", "https://")):
            return url
        return f"https://{url}"


@lru_cache
def get_settings() -> Settings:
    return Settings()
