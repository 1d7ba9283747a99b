"""
Inference orchestration: resolve an address, then try each strategy in turn.

State machine per search:

    START -> TRY_BUILDING -> DONE
                          -> TRY_STREET -> DONE
                                        -> FAILED

Each strategy runs under its own deadline; running past it counts the same as
the strategy failing. Only one search is live at a time: starting a new one
cancels the previous search, which then returns None without touching the
cache or the last reported result.
"""

import asyncio
import logging
from typing import Optional

from house_facing.core import settings
from house_facing.core.cancellation import CancellationToken
from house_facing.core.utils.address import clean_address, normalize_address
from house_facing.core.utils.geo import DirectionResult
from house_facing.geocoding.base import BaseGeocoder
from house_facing.geocoding.providers.nominatim import NominatimGeocoder
from house_facing.geocoding.resolver import AddressResolver
from house_facing.inference.base import (
    DirectionIndeterminate,
    FacingError,
    FacingReport,
    InferenceAttempt,
    StrategyOutcome,
)
from house_facing.inference.building import BuildingEdgeStrategy
from house_facing.inference.cache import ResultCache
from house_facing.inference.street import StreetOrientationStrategy
from house_facing.spatial.base import BaseSpatialProvider, SpatialQueryFailed
from house_facing.spatial.providers.overpass import OverpassProvider

logger = logging.getLogger(__name__)


class FacingDirectionEngine:
    """
    Find which way the building at an address faces.

    Usage:
        async with FacingDirectionEngine() as engine:
            result = await engine.search("360 Plantation St, Worcester, MA")
            print(engine.last_report.label, result.direction, result.bearing)
    """

    def __init__(
        self,
        geocoder: Optional[BaseGeocoder] = None,
        spatial_provider: Optional[BaseSpatialProvider] = None,
        cache: Optional[ResultCache] = None,
        strategy_timeout: Optional[float] = None,
        country_suffix: Optional[str] = None,
    ):
        """
        Args:
            geocoder: Geocoding provider (Nominatim by default)
            spatial_provider: Spatial feature provider (Overpass by default)
            cache: Result cache; a fresh one is created if not provided
            strategy_timeout: Seconds allowed per strategy attempt
            country_suffix: Country appended to the second geocoding query
        """
        self.geocoder = geocoder or NominatimGeocoder()
        self.spatial_provider = spatial_provider or OverpassProvider()
        self.cache = cache if cache is not None else ResultCache()
        self.strategy_timeout = strategy_timeout or settings.STRATEGY_TIMEOUT

        self.resolver = AddressResolver(self.geocoder, country_suffix=country_suffix)
        self.strategies = [
            BuildingEdgeStrategy(self.spatial_provider),
            StreetOrientationStrategy(self.spatial_provider),
        ]

        self.last_report: Optional[FacingReport] = None
        self._live_token: Optional[CancellationToken] = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        """Cancel any live search and close provider sessions."""
        self.cancel_in_flight()
        await self.geocoder.close()
        await self.spatial_provider.close()

    def cancel_in_flight(self) -> None:
        """Cancel the live search, if any. It will return None to its caller."""
        token, self._live_token = self._live_token, None
        if token is not None:
            token.cancel()

    async def search(self, address: str) -> Optional[DirectionResult]:
        """
        Infer the facing direction of the building at `address`.

        Returns:
            DirectionResult, or None if this search was superseded or cancelled

        Raises:
            ValueError: If the address is empty
            AddressNotFoundError: If the address could not be geocoded
            DirectionIndeterminate: If no strategy produced a direction
        """
        address = clean_address(address)
        key = normalize_address(address)

        self.cancel_in_flight()

        cached = self.cache.get(key)
        if cached is not None:
            logger.info(f"Cache hit for {address!r}: {cached.result.direction}")
            self.last_report = cached
            return cached.result

        token = CancellationToken()
        self._live_token = token

        task = asyncio.ensure_future(self._run(address, key, token))
        token.bind(task)

        try:
            report = await task
        except asyncio.CancelledError:
            if token.cancelled:
                logger.info(f"Search for {address!r} was cancelled")
                return None
            raise
        finally:
            if self._live_token is token:
                self._live_token = None

        return report.result

    async def _run(self, address: str, key: str, token: CancellationToken) -> FacingReport:
        attempt = InferenceAttempt(address=address, token=token)

        resolved = await self.resolver.resolve(address, token)
        attempt.point = resolved.point
        attempt.label = resolved.label

        outcome = await self.infer(attempt)

        # Nothing is published once the search was superseded
        token.raise_if_cancelled()

        report = FacingReport(
            label=attempt.label,
            result=outcome.result,
            provenance=outcome.provenance,
        )
        self.cache.put(key, report)
        self.last_report = report

        logger.info(
            f"{attempt.label!r} faces {outcome.result.direction} "
            f"({outcome.result.bearing} deg) via {attempt.provenance.value}"
        )
        return report

    async def infer(self, attempt: InferenceAttempt) -> StrategyOutcome:
        """
        Run the strategies in order under per-strategy deadlines.

        Raises:
            DirectionIndeterminate: If every strategy failed or timed out
        """
        for strategy in self.strategies:
            attempt.token.raise_if_cancelled()

            try:
                outcome = await asyncio.wait_for(
                    strategy.infer(attempt.point, attempt.token),
                    timeout=self.strategy_timeout,
                )
            except asyncio.TimeoutError:
                logger.warning(f"{strategy.name} strategy timed out after {self.strategy_timeout}s")
                continue
            except (FacingError, SpatialQueryFailed) as e:
                logger.info(f"{strategy.name} strategy unavailable: {e}")
                continue
            except Exception:
                logger.exception(f"{strategy.name} strategy failed unexpectedly")
                continue

            attempt.provenance = outcome.provenance
            return outcome

        raise DirectionIndeterminate()
