"""
Centralized configuration management for the house facing direction engine.

All configuration is loaded from environment variables with sensible defaults.
Use the `settings` singleton for accessing configuration values.

Usage:
    from house_facing.core.config import settings

    # Access configuration
    print(settings.OVERPASS_URL)
    print(settings.STRATEGY_TIMEOUT)
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from dotenv import load_dotenv

# Load environment variables from .env file
# Search in common locations
_env_paths = [
    Path(__file__).parent.parent.parent / ".env",  # repository root
    Path.cwd() / ".env",  # Current working directory
]

for env_path in _env_paths:
    if env_path.exists():
        load_dotenv(env_path)
        break


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    # ==========================================================================
    # Provider Endpoints
    # ==========================================================================
    NOMINATIM_BASE_URL: str = field(
        default_factory=lambda: os.getenv(
            "NOMINATIM_BASE_URL",
            "https://nominatim.openstreetmap.org"
        )
    )
    OVERPASS_URL: str = field(
        default_factory=lambda: os.getenv(
            "OVERPASS_URL",
            "https://overpass-api.de/api/interpreter"
        )
    )

    @property
    def NOMINATIM_SEARCH_URL(self) -> str:
        return f"{self.NOMINATIM_BASE_URL.rstrip('/')}/search"

    # ==========================================================================
    # Timeouts & Retries (seconds)
    # ==========================================================================
    REQUEST_TIMEOUT: float = field(
        default_factory=lambda: float(os.getenv("REQUEST_TIMEOUT", "15"))
    )
    STRATEGY_TIMEOUT: float = field(
        default_factory=lambda: float(os.getenv("STRATEGY_TIMEOUT", "8"))
    )
    MAX_RETRIES: int = field(
        default_factory=lambda: int(os.getenv("MAX_RETRIES", "3"))
    )
    RETRY_BACKOFF: float = field(
        default_factory=lambda: float(os.getenv("RETRY_BACKOFF", "0.5"))
    )

    # ==========================================================================
    # Spatial Search Offsets (decimal degrees)
    # ==========================================================================
    BUILDING_BBOX_OFFSET: float = field(
        default_factory=lambda: float(os.getenv("BUILDING_BBOX_OFFSET", "0.001"))
    )
    STREET_BBOX_OFFSET: float = field(
        default_factory=lambda: float(os.getenv("STREET_BBOX_OFFSET", "0.002"))
    )
    EXTENDED_STREET_BBOX_OFFSET: float = field(
        default_factory=lambda: float(os.getenv("EXTENDED_STREET_BBOX_OFFSET", "0.003"))
    )

    # ==========================================================================
    # Geocoding
    # ==========================================================================
    GEOCODE_RESULT_LIMIT: int = field(
        default_factory=lambda: int(os.getenv("GEOCODE_RESULT_LIMIT", "5"))
    )
    COUNTRY_SUFFIX: str = field(
        default_factory=lambda: os.getenv("COUNTRY_SUFFIX", "USA")
    )

    # ==========================================================================
    # Result Cache
    # ==========================================================================
    RESULT_CACHE_MAX_ENTRIES: int = field(
        default_factory=lambda: int(os.getenv("RESULT_CACHE_MAX_ENTRIES", "1024"))
    )
    RESULT_CACHE_TTL: float = field(
        default_factory=lambda: float(os.getenv("RESULT_CACHE_TTL", "86400"))
    )

    # ==========================================================================
    # User Agent & Logging
    # ==========================================================================
    USER_AGENT: str = field(
        default_factory=lambda: os.getenv("USER_AGENT", "HouseFacingDirection/1.0")
    )
    LOG_LEVEL: str = field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper()
    )

    def __post_init__(self):
        """Reject configurations the engine cannot work with."""
        for name in ("BUILDING_BBOX_OFFSET", "STREET_BBOX_OFFSET", "EXTENDED_STREET_BBOX_OFFSET"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.GEOCODE_RESULT_LIMIT < 1:
            raise ValueError("GEOCODE_RESULT_LIMIT must be at least 1")


# Singleton settings instance
settings = Settings()
