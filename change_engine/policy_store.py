import json
import logging
import os
from typing import Dict

from .errors import PolicyConfigError
from .policy import DEFAULT_POLICY, WORKFLOW_KEYS, RiskDimension, RiskPolicy, make_policy

logger = logging.getLogger("change_engine.policy_store")

POLICY_PATH = "data/change_policy.json"

_DIMENSION_FIELDS = ("id", "label", "low_description", "high_description")
_BOUND_FIELDS = ("low_max", "medium_max", "min_score", "max_score")


def policy_to_dict(policy: RiskPolicy) -> Dict:
    return {
        "version": policy.version,
        "dimensions": [
            {field: getattr(d, field) for field in _DIMENSION_FIELDS}
            for d in policy.dimensions
        ],
        "workflows": {k: list(v) for k, v in policy.workflows.items()},
        "low_max": policy.low_max,
        "medium_max": policy.medium_max,
        "min_score": policy.min_score,
        "max_score": policy.max_score,
    }


def policy_from_dict(data: Dict) -> RiskPolicy:
    if not isinstance(data, dict):
        raise PolicyConfigError("Policy file must contain a JSON object.")

    try:
        dimensions = [
            RiskDimension(**{field: str(d[field]) for field in _DIMENSION_FIELDS})
            for d in data["dimensions"]
        ]
        workflows = {str(k): [str(s) for s in v] for k, v in data["workflows"].items()}
        bounds = {field: data[field] for field in _BOUND_FIELDS if field in data}
        version = str(data.get("version", "custom"))
    except (KeyError, TypeError, AttributeError) as e:
        raise PolicyConfigError(f"Malformed policy: {e}") from e

    for name, value in bounds.items():
        # bool is an int subclass; JSON true/false is not a bound
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise PolicyConfigError(f"Policy bound '{name}' must be a number, got {value!r}.")

    ids = [d.id for d in dimensions]
    if not ids:
        raise PolicyConfigError("Policy defines no risk dimensions.")
    if len(set(ids)) != len(ids):
        raise PolicyConfigError(f"Duplicate dimension ids in policy: {ids}")

    policy = make_policy(version, dimensions, workflows, **bounds)
    if not policy.min_score <= policy.low_max <= policy.medium_max <= policy.max_score:
        raise PolicyConfigError(
            f"Tier bounds out of order: {policy.min_score} <= {policy.low_max} <= "
            f"{policy.medium_max} <= {policy.max_score} does not hold."
        )

    missing = [k for k in WORKFLOW_KEYS if k not in policy.workflows]
    if missing:
        logger.warning(f"Policy {version} has no workflow for: {', '.join(missing)}")
    return policy


def load_policy(path: str = POLICY_PATH) -> RiskPolicy:
    if not os.path.exists(path):
        return DEFAULT_POLICY

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise PolicyConfigError(f"Policy file {path} is not valid UTF-8 JSON: {e}") from e

    policy = policy_from_dict(data)
    logger.info(f"Loaded change policy {policy.version} from {path}")
    return policy


def save_policy(policy: RiskPolicy, path: str = POLICY_PATH) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(policy_to_dict(policy), f, ensure_ascii=False, indent=2)
