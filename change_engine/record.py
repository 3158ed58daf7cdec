import uuid
from datetime import datetime, timezone
from typing import Dict, Optional, Sequence

from .guidance import category_note, tier_authority
from .models import ChangeCategory, RiskAssessment
from .policy import DEFAULT_POLICY, RiskPolicy
from .scoring import ENGINE_VERSION


def now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0, tzinfo=None).isoformat() + "Z"


def new_record_id(prefix: str = "chg") -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def build_change_record(
    category: ChangeCategory,
    steps: Sequence[str],
    assessment: Optional[RiskAssessment] = None,
    explanation: Optional[Dict] = None,
    title: str = "",
    policy: RiskPolicy = DEFAULT_POLICY,
    record_id: str = "",
    timestamp_utc: str = "",
) -> Dict:
    """
    Flatten one classification session into a plain dict for display and export.
    Scores are only present for Normal changes that went through assessment.
    """
    record = {
        "record_id": record_id,
        "timestamp_utc": timestamp_utc,
        "title": title,
        "category": category.value,
        "category_note": category_note(category),
        "engine_version": ENGINE_VERSION,
        "policy_version": policy.version,
        "scores": {},
        "composite_score": None,
        "tier": None,
        "authority": None,
        "explanation": explanation or {},
        "approval_path": list(steps),
    }

    if assessment is not None:
        record["scores"] = {d.label: s for d, s in zip(policy.dimensions, assessment.scores)}
        record["composite_score"] = assessment.display_score
        record["tier"] = assessment.tier.value
        record["authority"] = tier_authority(assessment.tier)

    return record
