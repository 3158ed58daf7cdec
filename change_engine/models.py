from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .errors import InvalidInputError


class ChangeCategory(str, Enum):
    STANDARD = "Standard"
    NORMAL = "Normal"
    EMERGENCY = "Emergency"


class RiskTier(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


@dataclass(frozen=True)
class RiskAssessment:
    composite_score: float
    tier: RiskTier
    scores: Tuple[int, ...]

    @property
    def display_score(self) -> str:
        return f"{self.composite_score:.2f}"


def coerce_category(value) -> ChangeCategory:
    try:
        return ChangeCategory(value)
    except ValueError:
        raise InvalidInputError(f"Unknown change category: {value!r}") from None


def coerce_tier(value) -> RiskTier:
    try:
        return RiskTier(value)
    except ValueError:
        raise InvalidInputError(f"Unknown risk tier: {value!r}") from None
