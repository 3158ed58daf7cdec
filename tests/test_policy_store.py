import json

import pytest

from change_engine.errors import PolicyConfigError
from change_engine.models import RiskTier
from change_engine.policy import DEFAULT_POLICY
from change_engine.policy_store import load_policy, policy_to_dict, save_policy
from change_engine.scoring import assess_risk
from change_engine.workflow import resolve_path


def test_missing_file_falls_back_to_default(tmp_path):
    assert load_policy(str(tmp_path / "absent.json")) is DEFAULT_POLICY


def test_saved_policy_loads_back(tmp_path):
    path = tmp_path / "data" / "policy.json"

    save_policy(DEFAULT_POLICY, str(path))
    loaded = load_policy(str(path))

    assert policy_to_dict(loaded) == policy_to_dict(DEFAULT_POLICY)
    assert loaded.dimensions == DEFAULT_POLICY.dimensions


def test_custom_policy_changes_tiers_and_steps(tmp_path):
    data = policy_to_dict(DEFAULT_POLICY)
    data["version"] = "2.0.0"
    data["low_max"] = 1.5
    data["workflows"]["Normal-Medium"] = ["Requester submits RFC", "Change authority approval"]
    path = tmp_path / "policy.json"
    path.write_text(json.dumps(data), encoding="utf-8")

    policy = load_policy(str(path))
    result = assess_risk([2] * 7, policy)

    assert policy.version == "2.0.0"
    assert result.tier == RiskTier.MEDIUM
    assert resolve_path("Normal", result.tier, policy=policy) == (
        "Requester submits RFC",
        "Change authority approval",
    )


def test_missing_workflow_keys_are_logged(tmp_path, caplog):
    data = policy_to_dict(DEFAULT_POLICY)
    del data["workflows"]["Emergency"]
    path = tmp_path / "policy.json"
    path.write_text(json.dumps(data), encoding="utf-8")

    policy = load_policy(str(path))

    assert "Emergency" not in policy.workflows
    assert "Emergency" in caplog.text


def test_invalid_json_raises(tmp_path):
    path = tmp_path / "policy.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(PolicyConfigError):
        load_policy(str(path))


@pytest.mark.parametrize("mutate", [
    lambda d: d.pop("dimensions"),
    lambda d: d.update(workflows=[]),
    lambda d: d.update(dimensions=[]),
    lambda d: d["dimensions"].append(dict(d["dimensions"][0])),
    lambda d: d.update(low_max=4.0),
    lambda d: d.update(low_max="2.0"),
    lambda d: d.update(low_max=None),
    lambda d: d.update(medium_max=True),
    lambda d: d.update(max_score=[5]),
])
def test_malformed_policy_rejected(tmp_path, mutate):
    data = policy_to_dict(DEFAULT_POLICY)
    mutate(data)
    path = tmp_path / "policy.json"
    path.write_text(json.dumps(data), encoding="utf-8")

    with pytest.raises(PolicyConfigError):
        load_policy(str(path))


def test_non_utf8_file_raises(tmp_path):
    path = tmp_path / "policy.json"
    path.write_bytes(b'{"version": "\xff"}')

    with pytest.raises(PolicyConfigError):
        load_policy(str(path))
