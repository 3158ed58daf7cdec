# change_engine/scoring.py

ENGINE_VERSION = "0.1.0"

import logging
from typing import Dict, List, Sequence

from .errors import InvalidInputError
from .models import RiskAssessment, RiskTier
from .policy import DEFAULT_POLICY, RiskPolicy

logger = logging.getLogger("change_engine.scoring")

DEFAULT_SLIDER_VALUE = 3


def validate_scores(scores: Sequence[int], policy: RiskPolicy = DEFAULT_POLICY) -> List[int]:
    values = list(scores)
    expected = len(policy.dimensions)
    if len(values) != expected:
        raise InvalidInputError(f"Expected {expected} dimension scores, got {len(values)}.")

    for dim, value in zip(policy.dimensions, values):
        # bool is an int subclass; a checkbox value is not a score
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidInputError(f"Score for '{dim.id}' must be an integer, got {value!r}.")
        if not policy.min_score <= value <= policy.max_score:
            raise InvalidInputError(
                f"Score for '{dim.id}' must be between {policy.min_score} and {policy.max_score}, got {value}."
            )
    return values


def determine_tier(score: float, policy: RiskPolicy = DEFAULT_POLICY) -> RiskTier:
    if score <= policy.low_max:
        return RiskTier.LOW
    if score <= policy.medium_max:
        return RiskTier.MEDIUM
    return RiskTier.HIGH


def assess_risk(scores: Sequence[int], policy: RiskPolicy = DEFAULT_POLICY) -> RiskAssessment:
    """
    composite_score = sum(dimensions) / count(dimensions)

    Tiers (closed upper bounds):
      1.0 - 2.0  ->  Low    (peer review)
      2.0 - 3.5  ->  Medium (change authority)
      3.5 - 5.0  ->  High   (full CAB)
    """
    values = validate_scores(scores, policy)
    composite = sum(values) / len(values)
    tier = determine_tier(composite, policy)

    logger.debug(f"Assessed risk {composite:.2f} -> {tier.value}")
    return RiskAssessment(composite_score=composite, tier=tier, scores=tuple(values))


def scores_from_mapping(mapping: Dict[str, int], policy: RiskPolicy = DEFAULT_POLICY) -> List[int]:
    """Order {dimension_id: value} in canonical dimension order; unset dimensions read as the slider default."""
    return [mapping.get(dim_id, DEFAULT_SLIDER_VALUE) for dim_id in policy.dimension_ids]
