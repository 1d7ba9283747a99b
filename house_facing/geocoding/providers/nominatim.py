"""
Nominatim (OpenStreetMap) Geocoder provider.

Free geocoding using OpenStreetMap data.
https://nominatim.org/
"""

import asyncio
import logging
from typing import Any, List, Optional

import aiohttp
from pydantic import BaseModel, ConfigDict, ValidationError

from house_facing.core import settings
from house_facing.core.cancellation import CancellationToken
from house_facing.core.utils.geo import GeoPoint
from house_facing.geocoding.base import BaseGeocoder, GeocodeCandidate, GeocodingError

logger = logging.getLogger(__name__)


class NominatimAddress(BaseModel):
    """Address breakdown returned with `addressdetails=1`."""
    model_config = ConfigDict(extra="ignore")

    house_number: Optional[str] = None
    road: Optional[str] = None
    city: Optional[str] = None
    town: Optional[str] = None
    village: Optional[str] = None
    state: Optional[str] = None
    postcode: Optional[str] = None


class NominatimPlace(BaseModel):
    """One search result record."""
    model_config = ConfigDict(extra="ignore")

    display_name: str = ""
    lat: float
    lon: float
    importance: Optional[float] = None
    type: str = ""
    address: Optional[NominatimAddress] = None

    def to_candidate(self) -> GeocodeCandidate:
        address = self.address or NominatimAddress()
        return GeocodeCandidate(
            point=GeoPoint(self.lat, self.lon),
            label=self.display_name,
            importance=self.importance or 0.0,
            place_type=self.type,
            house_number=address.house_number,
            road=address.road,
            city=address.city or address.town or address.village,
            state=address.state,
            postcode=address.postcode,
        )


def parse_places(payload: Any) -> List[GeocodeCandidate]:
    """
    Convert a Nominatim JSON payload into candidates.

    Records that fail validation (missing or out-of-range coordinates) are
    dropped; a payload that is not a list is an error.
    """
    if not isinstance(payload, list):
        raise GeocodingError(
            f"Unexpected response shape: {type(payload).__name__}",
            provider="nominatim",
        )

    candidates = []
    for record in payload:
        try:
            candidates.append(NominatimPlace.model_validate(record).to_candidate())
        except (ValidationError, ValueError) as e:
            logger.debug(f"Nominatim: Skipping unusable record: {e}")
    return candidates


class NominatimGeocoder(BaseGeocoder):
    """
    Nominatim (OpenStreetMap) Geocoder.

    Pros:
    - Free
    - Good global coverage
    - Returns house numbers and place types used for ranking

    Cons:
    - Strict rate limiting (1 request/second)
    - Variable accuracy
    - Requires user agent

    Usage:
        geocoder = NominatimGeocoder()
        candidates = await geocoder.search("360 Plantation St", limit=5)
        await geocoder.close()
    """

    def __init__(
        self,
        search_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        request_timeout: Optional[float] = None,
    ):
        """
        Initialize Nominatim Geocoder.

        Args:
            search_url: Search endpoint (uses settings if not provided)
            user_agent: User agent string (required by Nominatim TOS)
            request_timeout: Per-request timeout in seconds
        """
        self.search_url = search_url or settings.NOMINATIM_SEARCH_URL
        self.user_agent = user_agent or settings.USER_AGENT
        self.request_timeout = request_timeout or settings.REQUEST_TIMEOUT
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def provider_name(self) -> str:
        return "nominatim"

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.request_timeout),
                headers={
                    "User-Agent": self.user_agent,
                    "Accept-Language": "en",
                },
            )
        return self._session

    async def search(
        self,
        query: str,
        limit: int = 5,
        token: Optional[CancellationToken] = None,
    ) -> List[GeocodeCandidate]:
        """
        Search Nominatim for an address.

        Args:
            query: Free-text address
            limit: Maximum number of results
            token: Cancellation token

        Returns:
            List of GeocodeCandidate in Nominatim's ranking order
        """
        token = token or CancellationToken()
        token.raise_if_cancelled()

        params = {
            "q": query,
            "format": "json",
            "limit": limit,
            "addressdetails": 1,
        }

        try:
            async with self._get_session().get(self.search_url, params=params) as response:
                if response.status != 200:
                    logger.warning(f"Nominatim HTTP {response.status} for {query}")
                    raise GeocodingError(
                        f"HTTP {response.status}",
                        provider=self.provider_name,
                        address=query,
                    )
                data = await response.json(content_type=None)
        except asyncio.TimeoutError:
            logger.warning(f"Nominatim: Timeout for {query}")
            raise GeocodingError("Request timed out", provider=self.provider_name, address=query)
        except aiohttp.ClientError as e:
            logger.warning(f"Nominatim: Transport error for {query}: {e}")
            raise GeocodingError(str(e), provider=self.provider_name, address=query) from e
        except ValueError as e:
            raise GeocodingError(
                f"Invalid JSON: {e}", provider=self.provider_name, address=query
            ) from e

        token.raise_if_cancelled()

        candidates = parse_places(data)
        logger.debug(f"Nominatim: {len(candidates)} results for {query}")
        return candidates[:limit]

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
