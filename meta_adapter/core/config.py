"""
Application configuration
"""

from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


PACKAGE_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Logging Settings
    LOG_LEVEL: str = "INFO"

    # API Settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Meta-Adapter"

    # CORS Settings
    BACKEND_CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8000"
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Outbound HTTP
    USER_AGENT: str = "MetaAdapter/1.0"
    REQUEST_TIMEOUT: float = 10.0
    SOURCE_FETCH_TIMEOUT: float = 10.0
    FLOW_TIMEOUT: float = 30.0
    MAX_CONCURRENT_REQUESTS: int = 10

    # Directory Sources
    PUBLIC_APIS_URL: str = "https://raw.githubusercontent.com/public-apis/public-apis/master/data/entries.json"
    SOURCE_FETCH_INTERVAL: int = 86400  # seconds
    QUICK_INGEST_ON_STARTUP: bool = True

    # Quality Thresholds
    QUALITY_MIN_SCORE: float = 0.4
    QUALITY_HTTPS_REQUIRED: bool = True
    QUALITY_AUTH_NONE_PREFERRED: bool = True
    QUALITY_AUTH_BAR: float = 0.7

    # Capability Registry
    DISPLAY_FIELDS_CONFIG_PATH: str = str(PACKAGE_ROOT / "config" / "display_fields.yaml")

    # Health Monitoring
    HEALTH_CHECK_CONCURRENCY: int = 5

    # Chain-data provider keys
    MORALIS_API_KEY: Optional[str] = None
    ALCHEMY_API_KEY: Optional[str] = None
    HELIUS_API_KEY: Optional[str] = None
    DEFAULT_CHAIN: str = "eth"

    # Environment
    ENVIRONMENT: str = "development"  # development, staging, production

    def get_cors_origins(self) -> List[str]:
        """Return the list of allowed CORS origins"""
        if self.BACKEND_CORS_ORIGINS:
            # Parse comma-separated string of origins
            origins = [origin.strip() for origin in self.BACKEND_CORS_ORIGINS.split(",") if origin.strip()]
            return origins if origins else self.CORS_ORIGINS
        return self.CORS_ORIGINS

    def get_provider_api_key(self, provider: str) -> Optional[str]:
        """Look up the API key for a chain-data provider, None if unset or blank"""
        value = getattr(self, f"{provider.upper()}_API_KEY", None)
        return value or None


# Create global settings instance
settings = Settings()


# Helper function to get absolute path
def get_absolute_path(relative_path: str) -> Path:
    """Convert relative path to absolute path"""
    path = Path(relative_path)
    if path.is_absolute():
        return path
    return Path.cwd() / path
