from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from .errors import PolicyKeyNotFoundError
from .models import ChangeCategory, RiskTier

POLICY_VERSION = "1.0.0"


@dataclass(frozen=True)
class RiskDimension:
    id: str
    label: str
    low_description: str
    high_description: str


@dataclass(frozen=True)
class RiskPolicy:
    version: str
    dimensions: Tuple[RiskDimension, ...]
    workflows: Mapping[str, Tuple[str, ...]]  # flat key -> ordered steps
    low_max: float = 2.0     # score <= low_max is Low
    medium_max: float = 3.5  # score <= medium_max is Medium, above is High
    min_score: int = 1
    max_score: int = 5
    # category -> tier -> ordered steps; Standard and Emergency sit under a None tier
    routes: Mapping[ChangeCategory, Mapping[Optional[RiskTier], Tuple[str, ...]]] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self):
        object.__setattr__(self, "routes", build_routes(self.workflows))

    @property
    def dimension_ids(self) -> Tuple[str, ...]:
        return tuple(d.id for d in self.dimensions)

    def steps_for(self, category: ChangeCategory, tier: Optional[RiskTier] = None) -> Tuple[str, ...]:
        tier = tier if category == ChangeCategory.NORMAL else None
        try:
            return self.routes[category][tier]
        except KeyError:
            raise PolicyKeyNotFoundError(workflow_key(category, tier)) from None


def workflow_key(category: ChangeCategory, tier: Optional[RiskTier] = None) -> str:
    if category == ChangeCategory.NORMAL:
        tier_name = tier.value if isinstance(tier, RiskTier) else str(tier)
        return f"{ChangeCategory.NORMAL.value}-{tier_name}"
    return category.value


def build_routes(workflows: Mapping[str, Tuple[str, ...]]) -> Mapping:
    routes = {}
    for category in ChangeCategory:
        tiers = list(RiskTier) if category == ChangeCategory.NORMAL else [None]
        routes[category] = MappingProxyType({
            tier: tuple(workflows[workflow_key(category, tier)])
            for tier in tiers
            if workflow_key(category, tier) in workflows
        })
    return MappingProxyType(routes)


def make_policy(version: str, dimensions, workflows, **bounds) -> RiskPolicy:
    return RiskPolicy(
        version=version,
        dimensions=tuple(dimensions),
        workflows=MappingProxyType({k: tuple(v) for k, v in workflows.items()}),
        **bounds,
    )


RISK_DIMENSIONS: Tuple[RiskDimension, ...] = (
    RiskDimension(
        id="impact-scope",
        label="Impact Scope",
        low_description="1 = Single non-critical component",
        high_description="5 = Multiple critical business services",
    ),
    RiskDimension(
        id="complexity",
        label="Complexity",
        low_description="1 = Single config change",
        high_description="5 = Multi-system orchestrated deployment",
    ),
    RiskDimension(
        id="reversibility",
        label="Reversibility",
        low_description="1 = Instant automated rollback",
        high_description="5 = Irreversible (data migration, schema)",
    ),
    RiskDimension(
        id="testing-confidence",
        label="Testing Confidence",
        low_description="1 = Full automated test coverage",
        high_description="5 = No test environment available",
    ),
    RiskDimension(
        id="deployment-history",
        label="Deployment History",
        low_description="1 = Identical change succeeded 10×",
        high_description="5 = First-of-its-kind change",
    ),
    RiskDimension(
        id="timing-sensitivity",
        label="Timing Sensitivity",
        low_description="1 = Off-peak, low-traffic window",
        high_description="5 = Peak hours, month-end, launch day",
    ),
    RiskDimension(
        id="dependency-count",
        label="Dependency Count",
        low_description="1 = Zero external dependencies",
        high_description="5 = 5+ teams / external vendors involved",
    ),
)

APPROVAL_WORKFLOWS = {
    "Standard": [
        "Requester triggers pipeline",
        "Automated pre-checks (lint, test, scan)",
        "Auto-approved — change model match verified",
        "Deploy",
        "Automated validation",
        "Change record logged automatically",
    ],
    "Normal-Low": [
        "Requester submits RFC",
        "Automated risk scoring",
        "Peer review (1 reviewer, async)",
        "Approved → Scheduled in change calendar",
        "Deploy in approved window",
        "Validation",
        "Close RFC",
    ],
    "Normal-Medium": [
        "Requester submits RFC",
        "Automated risk scoring",
        "Technical review (architect or senior engineer)",
        "Change authority approval",
        "Scheduled in change calendar (with conflict check)",
        "Deploy with monitoring",
        "Validation + brief PIR",
        "Close RFC",
    ],
    "Normal-High": [
        "Requester submits RFC",
        "Automated risk scoring",
        "Technical review + security review",
        "Pre-CAB: documentation completeness check",
        "CAB review (weekly cadence or ad-hoc)",
        "Senior management sign-off",
        "Scheduled with communication plan",
        "Deploy with war-room / bridge call",
        "Validation + full PIR",
        "Close RFC",
    ],
    "Emergency": [
        "Incident declared",
        "Emergency RFC created (minimal fields)",
        "ECAB approval (phone/chat, 2 approvers minimum)",
        "Implement immediately",
        "Validate service restored",
        "Retrospective RFC completion (within 48 h)",
        "Mandatory PIR",
    ],
}

DEFAULT_POLICY: RiskPolicy = make_policy(POLICY_VERSION, RISK_DIMENSIONS, APPROVAL_WORKFLOWS)

WORKFLOW_KEYS: Tuple[str, ...] = (
    workflow_key(ChangeCategory.STANDARD),
    workflow_key(ChangeCategory.NORMAL, RiskTier.LOW),
    workflow_key(ChangeCategory.NORMAL, RiskTier.MEDIUM),
    workflow_key(ChangeCategory.NORMAL, RiskTier.HIGH),
    workflow_key(ChangeCategory.EMERGENCY),
)
