from typing import Dict, List

from .models import ChangeCategory, RiskTier
from .policy import DEFAULT_POLICY, RiskPolicy

CATEGORY_NOTES = {
    ChangeCategory.STANDARD: (
        "Pre-approved change model confirmed. No per-instance approval required — "
        "proceed through the automated pipeline."
    ),
    ChangeCategory.NORMAL: (
        "This change requires assessment and authorization. Score the 7 risk dimensions below, "
        "then click Assess Risk."
    ),
    ChangeCategory.EMERGENCY: (
        "Service is down. Implement immediately via the Emergency Change flow. "
        "Complete full documentation within 48 hours."
    ),
}

TIER_AUTHORITY = {
    RiskTier.LOW: "Peer review",
    RiskTier.MEDIUM: "Change authority",
    RiskTier.HIGH: "Full CAB",
}


def category_note(category: ChangeCategory) -> str:
    return CATEGORY_NOTES.get(category, "")


def tier_authority(tier: RiskTier) -> str:
    return TIER_AUTHORITY.get(tier, "")


def scoring_guide(policy: RiskPolicy = DEFAULT_POLICY) -> List[Dict[str, str]]:
    """Read-only rows describing each dimension's 1 and 5 anchors."""
    return [
        {
            "Dimension": d.label,
            "Low (1)": d.low_description,
            "High (5)": d.high_description,
        }
        for d in policy.dimensions
    ]
