import logging

import pytest

from change_engine.errors import InvalidInputError, MissingTierError, PolicyKeyNotFoundError
from change_engine.models import ChangeCategory, RiskTier
from change_engine.policy import DEFAULT_POLICY, make_policy
from change_engine.workflow import resolve_path

STANDARD_STEPS = (
    "Requester triggers pipeline",
    "Automated pre-checks (lint, test, scan)",
    "Auto-approved — change model match verified",
    "Deploy",
    "Automated validation",
    "Change record logged automatically",
)

NORMAL_LOW_STEPS = (
    "Requester submits RFC",
    "Automated risk scoring",
    "Peer review (1 reviewer, async)",
    "Approved → Scheduled in change calendar",
    "Deploy in approved window",
    "Validation",
    "Close RFC",
)

NORMAL_MEDIUM_STEPS = (
    "Requester submits RFC",
    "Automated risk scoring",
    "Technical review (architect or senior engineer)",
    "Change authority approval",
    "Scheduled in change calendar (with conflict check)",
    "Deploy with monitoring",
    "Validation + brief PIR",
    "Close RFC",
)

NORMAL_HIGH_STEPS = (
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
)

EMERGENCY_STEPS = (
    "Incident declared",
    "Emergency RFC created (minimal fields)",
    "ECAB approval (phone/chat, 2 approvers minimum)",
    "Implement immediately",
    "Validate service restored",
    "Retrospective RFC completion (within 48 h)",
    "Mandatory PIR",
)


def test_standard_path_is_verbatim():
    assert resolve_path("Standard", None) == STANDARD_STEPS
    assert resolve_path(ChangeCategory.STANDARD) == STANDARD_STEPS


@pytest.mark.parametrize("tier", [None, "Low", RiskTier.HIGH])
def test_emergency_path_ignores_tier(tier):
    assert resolve_path("Emergency", tier) == EMERGENCY_STEPS


def test_normal_low_path_is_verbatim():
    assert resolve_path(ChangeCategory.NORMAL, RiskTier.LOW) == NORMAL_LOW_STEPS


def test_normal_medium_path_is_verbatim():
    assert resolve_path("Normal", "Medium") == NORMAL_MEDIUM_STEPS


def test_normal_high_path_is_verbatim():
    assert resolve_path("Normal", RiskTier.HIGH) == NORMAL_HIGH_STEPS


def test_normal_without_tier_raises():
    with pytest.raises(MissingTierError):
        resolve_path("Normal", None)


def test_unknown_category_or_tier_yields_empty_path(caplog):
    with caplog.at_level(logging.WARNING, logger="change_engine.workflow"):
        assert resolve_path("Urgent", None) == ()
        assert resolve_path("Normal", "Critical") == ()

    assert "Urgent" in caplog.text
    assert "Critical" in caplog.text


def test_unknown_category_or_tier_raises_when_strict():
    with pytest.raises(InvalidInputError):
        resolve_path("Urgent", None, strict=True)
    with pytest.raises(InvalidInputError):
        resolve_path("Normal", "Critical", strict=True)


def test_missing_tier_raises_even_when_lenient():
    with pytest.raises(MissingTierError):
        resolve_path(ChangeCategory.NORMAL, None, strict=False)


def test_path_is_immutable_and_repeatable():
    first = resolve_path("Normal", "Low")
    second = resolve_path("Normal", "Low")

    assert first == second
    assert isinstance(first, tuple)


def test_policy_gap_returns_empty_path(caplog):
    workflows = {k: v for k, v in DEFAULT_POLICY.workflows.items() if k != "Normal-High"}
    policy = make_policy("gap", DEFAULT_POLICY.dimensions, workflows)

    with caplog.at_level(logging.WARNING, logger="change_engine.workflow"):
        steps = resolve_path("Normal", "High", policy=policy)

    assert steps == ()
    assert "Normal-High" in caplog.text


def test_policy_gap_raises_when_strict():
    policy = make_policy("gap", DEFAULT_POLICY.dimensions, {})

    with pytest.raises(PolicyKeyNotFoundError) as exc:
        resolve_path("Standard", policy=policy, strict=True)

    assert exc.value.key == "Standard"
