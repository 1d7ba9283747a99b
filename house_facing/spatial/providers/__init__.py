"""
Spatial feature provider implementations.
"""

from house_facing.spatial.providers.overpass import OverpassProvider

__all__ = ["OverpassProvider"]
