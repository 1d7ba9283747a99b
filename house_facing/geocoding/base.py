"""
Base classes and interfaces for geocoding providers.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, List, Dict, Any

from house_facing.core.cancellation import CancellationToken
from house_facing.core.utils.geo import GeoPoint

# Place types that identify a single building rather than a street or area
BUILDING_PLACE_TYPES = frozenset({"house", "building"})


@dataclass(frozen=True)
class GeocodeCandidate:
    """One ranked match returned by a geocoding provider."""

    point: GeoPoint
    label: str = ""
    importance: float = 0.0
    place_type: str = ""
    house_number: Optional[str] = None
    road: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postcode: Optional[str] = None

    @property
    def has_house_number(self) -> bool:
        return bool(self.house_number)

    @property
    def is_building(self) -> bool:
        return self.place_type in BUILDING_PLACE_TYPES

    @property
    def address_details(self) -> Dict[str, Any]:
        """Address breakdown for logging."""
        return {
            "house_number": self.house_number,
            "road": self.road,
            "city": self.city,
            "state": self.state,
            "postcode": self.postcode,
        }


class GeocodingError(Exception):
    """Exception raised when a geocoding request fails."""

    def __init__(self, message: str, provider: str = "", address: str = ""):
        self.message = message
        self.provider = provider
        self.address = address
        super().__init__(f"[{provider}] {message}" if provider else message)


class AddressNotFoundError(GeocodingError):
    """No query variant produced a single candidate."""

    def __init__(
        self,
        message: str = "Address not found. Please check the address and try again.",
        provider: str = "",
        address: str = "",
    ):
        super().__init__(message, provider=provider, address=address)


class BaseGeocoder(ABC):
    """
    Abstract base class for geocoding providers.

    Subclasses must implement:
    - search(): Return ranked candidates for a free-text query
    - provider_name: Name of the provider

    Optional overrides:
    - close(): Release network resources
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Name of the geocoding provider."""
        pass

    @abstractmethod
    async def search(
        self,
        query: str,
        limit: int = 5,
        token: Optional[CancellationToken] = None,
    ) -> List[GeocodeCandidate]:
        """
        Search for candidates matching a free-text address.

        Args:
            query: Address text, sent as-is
            limit: Maximum number of candidates to return
            token: Cancellation token checked around the request

        Returns:
            Candidates in provider order (possibly empty)

        Raises:
            GeocodingError: On non-success status, transport failure or a
                malformed response
        """
        pass

    async def close(self) -> None:
        """Release any open sessions."""
        pass
