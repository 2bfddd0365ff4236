"""In-memory fake of the TestRail API v2.

Answers the same endpoints as TestRailHttpClient from a dataset dict, so the
whole pipeline can run without a network. The dataset may be loaded from a
YAML fixture:

    projects:
      - {id: 1, name: Widgets}
    statuses:
      - {id: 1, name: passed, label: Passed}
    configs:
      1:
        - id: 1
          name: Operating Systems
          configs: [{id: 1, name: Linux}]
    runs:
      1:
        - {id: 1, name: Nightly, passed_count: 3}
    plans:
      1:
        - id: 10
          name: Release
          entries:
            - runs: [{id: 2, name: PlanA-Linux, config_ids: [1]}]
"""

import copy
import re
from pathlib import Path
from typing import Any, Optional, Union

import yaml

_ENDPOINT_RE = re.compile(r"^(?P<name>[a-z_]+)(?:/(?P<arg>\d+))?")

DATASET_KEYS = ("projects", "statuses", "configs", "runs", "plans")


def default_dataset() -> dict[str, Any]:
    """Built-in dataset: project "Widgets" with one standalone run and one plan."""
    return {
        "projects": [
            {"id": 1, "name": "Widgets", "is_completed": False},
        ],
        "statuses": [
            {"id": 1, "name": "passed", "label": "Passed", "is_system": True},
            {"id": 2, "name": "blocked", "label": "Blocked", "is_system": True},
            {"id": 3, "name": "untested", "label": "Untested", "is_system": True},
            {"id": 4, "name": "retest", "label": "Retest", "is_system": True},
            {"id": 5, "name": "failed", "label": "Failed", "is_system": True},
        ],
        "configs": {
            1: [
                {
                    "id": 1,
                    "name": "Operating Systems",
                    "project_id": 1,
                    "configs": [
                        {"id": 1, "group_id": 1, "name": "Linux"},
                        {"id": 2, "group_id": 1, "name": "Windows"},
                    ],
                },
            ],
        },
        "runs": {
            1: [
                {
                    "id": 1, "name": "Nightly", "plan_id": None, "config_ids": [],
                    "passed_count": 10, "blocked_count": 0, "untested_count": 0,
                    "retest_count": 0, "failed_count": 2,
                },
            ],
        },
        "plans": {
            1: [
                {
                    "id": 10,
                    "name": "Release 1.0",
                    "entries": [
                        {
                            "id": "5d1a0c4e-0000-4000-8000-000000000001",
                            "suite_id": 1,
                            "name": "PlanA",
                            "runs": [
                                {
                                    "id": 11, "name": "PlanA-Linux", "plan_id": 10,
                                    "config_ids": [1], "config": "Linux",
                                    "passed_count": 5, "blocked_count": 0,
                                    "untested_count": 0, "retest_count": 0,
                                    "failed_count": 0,
                                },
                                {
                                    "id": 12, "name": "PlanA-Win", "plan_id": 10,
                                    "config_ids": [2], "config": "Windows",
                                    "passed_count": 3, "blocked_count": 1,
                                    "untested_count": 0, "retest_count": 0,
                                    "failed_count": 1,
                                },
                            ],
                        },
                    ],
                },
            ],
        },
    }


def load_mock_data(file_path: Union[str, Path]) -> dict[str, Any]:
    """Load a mock dataset from a YAML fixture.

    Raises:
        FileNotFoundError: If the fixture doesn't exist.
        ValueError: If the YAML is empty or not a mapping.
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Mock data file not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        raise ValueError(f"Empty mock data file: {file_path}")
    if not isinstance(data, dict):
        raise ValueError(
            f"Mock data must be a YAML mapping, got {type(data).__name__}"
        )

    unknown = set(data) - set(DATASET_KEYS)
    if unknown:
        raise ValueError(
            f"Unknown keys in {file_path}: {', '.join(sorted(unknown))}"
        )

    return data


class MockTransport:
    """Deterministic stand-in for TestRailHttpClient."""

    def __init__(self, dataset: Optional[dict[str, Any]] = None):
        source = dataset if dataset is not None else default_dataset()
        self.dataset = {
            "projects": list(source.get("projects") or []),
            "statuses": list(source.get("statuses") or []),
            "configs": _by_project(source.get("configs")),
            "runs": _by_project(source.get("runs")),
            "plans": _by_project(source.get("plans")),
        }
        self.requests: list[str] = []

    def get(self, endpoint: str) -> Any:
        """Answer a GET for an API v2 endpoint.

        Raises:
            ValueError: For unsupported endpoints or unknown plan IDs.
        """
        self.requests.append(endpoint)

        match = _ENDPOINT_RE.match(endpoint)
        if not match:
            raise ValueError(f"Unsupported endpoint: {endpoint}")

        name = match.group("name")
        arg = int(match.group("arg")) if match.group("arg") else None

        if name == "get_projects":
            return self._page("projects", self.dataset["projects"])
        if name == "get_statuses":
            return copy.deepcopy(self.dataset["statuses"])
        if name == "get_configs" and arg is not None:
            return copy.deepcopy(self.dataset["configs"].get(arg, []))
        if name == "get_runs" and arg is not None:
            return self._page("runs", self.dataset["runs"].get(arg, []))
        if name == "get_plans" and arg is not None:
            plans = [
                {k: v for k, v in plan.items() if k != "entries"}
                for plan in self.dataset["plans"].get(arg, [])
            ]
            return self._page("plans", plans)
        if name == "get_plan" and arg is not None:
            return copy.deepcopy(self._find_plan(arg))

        raise ValueError(f"Unsupported endpoint: {endpoint}")

    def _find_plan(self, plan_id: int) -> dict:
        for plans in self.dataset["plans"].values():
            for plan in plans:
                if plan.get("id") == plan_id:
                    return plan
        raise ValueError(f"Field :plan_id is not a valid test plan: {plan_id}")

    @staticmethod
    def _page(key: str, items: list) -> dict:
        """Wrap a list the way paginated TestRail endpoints do."""
        return {
            "offset": 0,
            "limit": 250,
            "size": len(items),
            "_links": {"next": None, "prev": None},
            key: copy.deepcopy(items),
        }

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def _by_project(mapping: Any) -> dict[int, list]:
    """Normalize a project-keyed mapping; YAML may give string keys."""
    if not mapping:
        return {}
    if not isinstance(mapping, dict):
        raise ValueError(
            f"Expected a mapping keyed by project ID, got {type(mapping).__name__}"
        )
    return {int(k): list(v or []) for k, v in mapping.items()}
