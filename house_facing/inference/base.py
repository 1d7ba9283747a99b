"""
Shared types and errors for facing-direction inference.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from house_facing.core.cancellation import CancellationToken
from house_facing.core.utils.geo import DirectionResult, GeoPoint


class Provenance(str, Enum):
    """Which heuristic produced a result."""
    BUILDING_EDGE = "building"
    LONGEST_EDGE = "longest_edge"
    STREET = "street"


class FacingError(Exception):
    """Base class for inference failures."""

    default_message = "Direction could not be determined."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class OrientationIndeterminate(FacingError):
    """Building geometry is missing or too degenerate to pick a facing edge."""
    default_message = "Could not determine building orientation"


class NoStreetData(FacingError):
    """No usable road geometry near the target."""
    default_message = "No suitable street data found"


class DirectionIndeterminate(FacingError):
    """Every strategy failed or timed out."""
    default_message = "Direction could not be determined. Try another address."


@dataclass(frozen=True)
class StrategyOutcome:
    """A strategy's answer together with the heuristic that produced it."""

    result: DirectionResult
    provenance: Provenance


@dataclass(frozen=True)
class FacingReport:
    """What a finished search shows: the found address and its facing direction."""

    label: str
    result: DirectionResult
    provenance: Provenance

    @property
    def as_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "address": self.label,
            "direction": self.result.direction,
            "bearing": self.result.bearing,
            "method": self.provenance.value,
        }


@dataclass
class InferenceAttempt:
    """Per-search state, kept for logging only."""

    address: str
    token: CancellationToken = field(default_factory=CancellationToken)
    point: Optional[GeoPoint] = None
    label: str = ""
    provenance: Optional[Provenance] = None
