import logging
from typing import Tuple

from .errors import InvalidInputError, MissingTierError, PolicyKeyNotFoundError
from .models import ChangeCategory, coerce_category, coerce_tier
from .policy import DEFAULT_POLICY, RiskPolicy

logger = logging.getLogger("change_engine.workflow")


def resolve_path(
    category,
    tier=None,
    policy: RiskPolicy = DEFAULT_POLICY,
    strict: bool = False,
) -> Tuple[str, ...]:
    """
    Return the ordered approval steps for a change.

    Normal changes are looked up by tier and raise MissingTierError without one.
    Standard and Emergency ignore any tier passed in.

    An unrecognised category or tier, or a policy table without an entry for
    the resolved key, yields an empty path (logged as a warning) unless
    strict=True, in which case InvalidInputError or PolicyKeyNotFoundError
    propagates.
    """
    try:
        category = coerce_category(category)

        resolved_tier = None
        if category == ChangeCategory.NORMAL:
            if tier is None:
                raise MissingTierError("A risk tier is required to resolve the approval path of a Normal change.")
            resolved_tier = coerce_tier(tier)

        return policy.steps_for(category, resolved_tier)
    except (InvalidInputError, PolicyKeyNotFoundError) as e:
        if strict:
            raise
        logger.warning(f"Policy {policy.version}: {e}; returning empty approval path")
        return ()
