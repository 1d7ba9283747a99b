"""
Geocoding provider implementations.
"""

from house_facing.geocoding.providers.nominatim import NominatimGeocoder

__all__ = ["NominatimGeocoder"]
