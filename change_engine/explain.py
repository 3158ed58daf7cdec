from typing import Dict, List, Sequence, Tuple

from .policy import DEFAULT_POLICY, RiskPolicy
from .scoring import validate_scores


def explain_assessment(scores: Sequence[int], policy: RiskPolicy = DEFAULT_POLICY, top: int = 2) -> Dict[str, object]:
    """
    Returns:
    - highest_dimensions (top) - the dimensions pushing the tier up
    - lowest_dimensions (top)
    - at_ceiling: dimensions scored at the policy maximum
    Ties keep canonical dimension order.
    """
    values = validate_scores(scores, policy)
    items: List[Tuple[str, str, int]] = [(d.id, d.label, s) for d, s in zip(policy.dimensions, values)]

    # sorted() is stable, so equal scores stay in dimension order
    highest = sorted(items, key=lambda x: -x[2])[:top]
    lowest = sorted(items, key=lambda x: x[2])[:top]

    return {
        "highest_dimensions": [{"dimension": i, "label": l, "score": s} for i, l, s in highest],
        "lowest_dimensions": [{"dimension": i, "label": l, "score": s} for i, l, s in lowest],
        "at_ceiling": [l for _, l, s in items if s == policy.max_score],
    }
