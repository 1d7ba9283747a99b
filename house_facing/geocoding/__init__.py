"""
Geocoding module: provider interface, Nominatim client and address resolution.

Usage:
    from house_facing.geocoding import NominatimGeocoder, AddressResolver

    resolver = AddressResolver(NominatimGeocoder())
    resolved = await resolver.resolve("360 Plantation St, Worcester, MA")
"""

from house_facing.geocoding.base import (
    GeocodeCandidate,
    GeocodingError,
    AddressNotFoundError,
    BaseGeocoder,
)
from house_facing.geocoding.providers.nominatim import NominatimGeocoder
from house_facing.geocoding.resolver import (
    AddressResolver,
    ResolvedAddress,
    score_candidate,
    build_query_variants,
)

__all__ = [
    # Base classes
    "GeocodeCandidate",
    "GeocodingError",
    "AddressNotFoundError",
    "BaseGeocoder",
    # Providers
    "NominatimGeocoder",
    # Resolution
    "AddressResolver",
    "ResolvedAddress",
    "score_candidate",
    "build_query_variants",
]
