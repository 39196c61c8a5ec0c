"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Listing
    page_size: int = 24
    debounce_seconds: float = 0.3

    # Filter panel
    visible_options: int = 5
    expanded_sections: int = 4
    price_step: int = 10

    # Demo catalog
    catalog_seed: int = 42
    products_per_category: int = 8

    # Logging
    log_level: str = "INFO"

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
