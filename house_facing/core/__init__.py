"""
Core module providing shared configuration and utilities.

This module consolidates common functionality used across the codebase:
- Configuration management (settings, environment variables)
- Utility functions (geometry kernel, address normalization)

Usage:
    from house_facing.core import settings
    from house_facing.core.utils import haversine_distance, normalize_address
"""

from house_facing.core.config import settings, Settings

__all__ = [
    "settings",
    "Settings",
]
