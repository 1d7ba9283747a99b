"""
Overpass API spatial provider.

Fetches OpenStreetMap buildings and highways inside a bounding box.
https://wiki.openstreetmap.org/wiki/Overpass_API
"""

import asyncio
import logging
from typing import Any, List, Optional, Union

import aiohttp
from pydantic import BaseModel, ConfigDict, ValidationError

from house_facing.core import settings
from house_facing.core.cancellation import CancellationToken
from house_facing.core.utils.geo import GeoPoint
from house_facing.spatial.base import BaseSpatialProvider, SpatialElement, SpatialQueryFailed
from house_facing.spatial.query import FeatureQuery

logger = logging.getLogger(__name__)

# Statuses Overpass uses for rate limiting and overload
RETRYABLE_STATUSES = frozenset({429, 502, 503, 504})


class OverpassCoordinate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    lat: float
    lon: float


class OverpassElement(BaseModel):
    """One element of an `out geom` response."""
    model_config = ConfigDict(extra="ignore")

    type: str = ""
    id: int = 0
    geometry: Optional[List[Optional[OverpassCoordinate]]] = None
    nodes: Optional[List[Union[int, OverpassCoordinate]]] = None

    def to_element(self) -> SpatialElement:
        # Ways carry coordinates in `geometry`; `nodes` only when it holds lat/lon pairs
        if self.geometry:
            coords = [c for c in self.geometry if c is not None]
        else:
            coords = [n for n in (self.nodes or []) if isinstance(n, OverpassCoordinate)]

        return SpatialElement(
            osm_type=self.type,
            osm_id=self.id,
            points=tuple(GeoPoint(c.lat, c.lon) for c in coords),
        )


def parse_elements(payload: Any) -> List[SpatialElement]:
    """
    Convert an Overpass JSON payload into spatial elements.

    Elements that fail validation are dropped; a payload without an
    `elements` list is an error.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("elements"), list):
        raise SpatialQueryFailed("Response has no elements list", provider="overpass")

    elements = []
    for raw in payload["elements"]:
        try:
            elements.append(OverpassElement.model_validate(raw).to_element())
        except (ValidationError, ValueError) as e:
            logger.debug(f"Overpass: Skipping unusable element: {e}")
    return elements


class OverpassProvider(BaseSpatialProvider):
    """
    Overpass API client.

    Usage:
        provider = OverpassProvider()
        query = build_feature_query(FeatureKind.BUILDING, build_bounding_box(point, 0.001))
        buildings = await provider.fetch(query)
        await provider.close()
    """

    def __init__(
        self,
        url: Optional[str] = None,
        request_timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_backoff: Optional[float] = None,
        user_agent: Optional[str] = None,
    ):
        self.url = url or settings.OVERPASS_URL
        self.request_timeout = request_timeout or settings.REQUEST_TIMEOUT
        self.max_retries = settings.MAX_RETRIES if max_retries is None else max_retries
        self.retry_backoff = settings.RETRY_BACKOFF if retry_backoff is None else retry_backoff
        self.user_agent = user_agent or settings.USER_AGENT
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def provider_name(self) -> str:
        return "overpass"

    @property
    def server_timeout(self) -> int:
        """Declared server-side timeout, matching the client request timeout."""
        return max(1, int(round(self.request_timeout)))

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.request_timeout),
                headers={"User-Agent": self.user_agent},
            )
        return self._session

    async def fetch(
        self,
        query: FeatureQuery,
        token: Optional[CancellationToken] = None,
    ) -> List[SpatialElement]:
        token = token or CancellationToken()
        body = {"data": query.to_overpass(self.server_timeout)}
        attempts = max(1, self.max_retries)

        for attempt in range(1, attempts + 1):
            token.raise_if_cancelled()

            try:
                async with self._get_session().post(self.url, data=body) as response:
                    status = response.status
                    if status == 200:
                        data = await response.json(content_type=None)
            except asyncio.TimeoutError:
                logger.warning(f"Overpass: Timeout fetching {query.kind.value}")
                raise SpatialQueryFailed("Request timed out", provider=self.provider_name)
            except aiohttp.ClientError as e:
                logger.warning(f"Overpass: Transport error fetching {query.kind.value}: {e}")
                raise SpatialQueryFailed(str(e), provider=self.provider_name) from e
            except ValueError as e:
                raise SpatialQueryFailed(f"Invalid JSON: {e}", provider=self.provider_name) from e

            token.raise_if_cancelled()

            if status == 200:
                elements = parse_elements(data)
                logger.debug(
                    f"Overpass: {len(elements)} {query.kind.value} elements "
                    f"in {query.box.as_overpass}"
                )
                return elements

            if status in RETRYABLE_STATUSES and attempt < attempts:
                delay = self.retry_backoff * attempt
                logger.warning(
                    f"Overpass HTTP {status} (attempt {attempt}/{attempts}), "
                    f"retrying in {delay:.1f}s"
                )
                await asyncio.sleep(delay)
                continue

            logger.warning(f"Overpass HTTP {status} fetching {query.kind.value}")
            raise SpatialQueryFailed(
                "Failed to fetch data from Overpass API",
                provider=self.provider_name,
                status_code=status,
            )

        # Loop always returns or raises
        raise SpatialQueryFailed("No attempts made", provider=self.provider_name)

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
