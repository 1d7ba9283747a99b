"""
Address resolution: turn free text into one best coordinate and label.

Provider "importance" alone ranks well-known places first, which is the wrong
bias for exact street addresses. Candidates are therefore re-scored so that
house-number and building-level matches win, and the search stops as soon as
one good enough match is seen.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from house_facing.core import settings
from house_facing.core.cancellation import CancellationToken
from house_facing.core.utils.geo import GeoPoint
from house_facing.geocoding.base import (
    AddressNotFoundError,
    BaseGeocoder,
    GeocodeCandidate,
    GeocodingError,
)

logger = logging.getLogger(__name__)

HOUSE_NUMBER_BOOST = 0.5
BUILDING_TYPE_BOOST = 0.3
# Best score above which a variant's result is accepted without trying more
ACCEPT_SCORE = 0.5


@dataclass(frozen=True)
class ResolvedAddress:
    """The candidate chosen for an address."""

    point: GeoPoint
    label: str
    score: float
    candidate: GeocodeCandidate


def score_candidate(candidate: GeocodeCandidate) -> float:
    """importance + 0.5 for a house number + 0.3 for a house/building place type."""
    score = candidate.importance or 0.0
    if candidate.has_house_number:
        score += HOUSE_NUMBER_BOOST
    if candidate.is_building:
        score += BUILDING_TYPE_BOOST
    return score


def build_query_variants(address: str, country_suffix: Optional[str] = None) -> List[str]:
    """
    Ordered geocoder queries for an address.

    The address as entered comes first, followed by the address with the
    country appended.
    """
    variants = [address]
    if country_suffix:
        variants.append(f"{address}, {country_suffix}")
    return variants


class AddressResolver:
    """
    Pick the best geocoding candidate across query variants.

    Usage:
        resolver = AddressResolver(NominatimGeocoder())
        resolved = await resolver.resolve("360 Plantation St, Worcester, MA")
        print(resolved.point, resolved.label)
    """

    def __init__(
        self,
        geocoder: BaseGeocoder,
        country_suffix: Optional[str] = None,
        result_limit: Optional[int] = None,
    ):
        self.geocoder = geocoder
        self.country_suffix = settings.COUNTRY_SUFFIX if country_suffix is None else country_suffix
        self.result_limit = result_limit or settings.GEOCODE_RESULT_LIMIT

    def query_variants(self, address: str) -> Sequence[str]:
        return build_query_variants(address, self.country_suffix)

    async def resolve(
        self,
        address: str,
        token: Optional[CancellationToken] = None,
    ) -> ResolvedAddress:
        """
        Resolve an address to a single coordinate and label.

        Args:
            address: Trimmed, non-empty address text
            token: Cancellation token forwarded to the geocoder

        Returns:
            ResolvedAddress for the highest-scoring candidate

        Raises:
            AddressNotFoundError: If no variant returned any candidate
        """
        token = token or CancellationToken()

        best: Optional[GeocodeCandidate] = None
        best_score = float("-inf")

        for query in self.query_variants(address):
            token.raise_if_cancelled()
            logger.debug(f"Trying geocoding query: {query!r}")

            try:
                candidates = await self.geocoder.search(query, limit=self.result_limit, token=token)
            except GeocodingError as e:
                logger.warning(f"Geocoding query {query!r} failed: {e}")
                continue

            logger.debug(f"Query {query!r} returned {len(candidates)} results")

            for candidate in candidates:
                score = score_candidate(candidate)
                if score > best_score:
                    best, best_score = candidate, score

            if best is not None and (best.has_house_number or best_score > ACCEPT_SCORE):
                logger.debug(f"Accepting result from query {query!r} (score {best_score:.2f})")
                break

        if best is None:
            raise AddressNotFoundError(provider=self.geocoder.provider_name, address=address)

        logger.info(
            f"Resolved {address!r} to {best.label!r} at {best.point} "
            f"(type={best.place_type or 'unknown'}, score={best_score:.2f}, "
            f"details={best.address_details})"
        )

        return ResolvedAddress(
            point=best.point,
            label=best.label,
            score=best_score,
            candidate=best,
        )
