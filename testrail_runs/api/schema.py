"""Data models for TestRail entities.

Normalizes the JSON payloads returned by the API into dataclasses.
Standalone runs and plan-child runs share the same Run shape.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

COUNT_SUFFIX = "_count"
CUSTOM_STATUS_OFFSET = 5


@dataclass(frozen=True)
class Project:
    """A TestRail project."""
    id: int
    name: str


@dataclass(frozen=True)
class Configuration:
    """A single configuration inside a project's configuration group."""
    id: int
    name: str
    group_id: Optional[int] = None


@dataclass(frozen=True)
class Status:
    """A result status (system or custom)."""
    id: int
    name: str
    label: str = ""
    is_system: bool = True

    @property
    def counter_name(self) -> str:
        """Run counter for this status, without the _count suffix.

        Custom statuses (id 6 and up) are always counted as
        custom_status1..N, whatever their configured name.
        """
        if self.is_system:
            return self.name
        return f"custom_status{self.id - CUSTOM_STATUS_OFFSET}"


@dataclass(frozen=True)
class Plan:
    """A test plan; its child runs are fetched separately."""
    id: int
    name: str = ""


@dataclass(frozen=True)
class Run:
    """A test run, standalone or owned by a plan entry."""
    id: int
    name: str
    config_ids: frozenset[int] = frozenset()
    plan_id: Optional[int] = None
    status_counts: Optional[dict[str, int]] = field(default=None, compare=False)

    @property
    def is_standalone(self) -> bool:
        return self.plan_id is None

    @classmethod
    def from_payload(cls, data: dict[str, Any], plan_id: Optional[int] = None) -> "Run":
        """Build a Run from a get_runs item or a get_plan entry run.

        Args:
            data: Run payload.
            plan_id: Owning plan, overriding the payload's plan_id if given.
        """
        counts = {
            key[: -len(COUNT_SUFFIX)]: int(value or 0)
            for key, value in data.items()
            if key.endswith(COUNT_SUFFIX)
        }
        return cls(
            id=data["id"],
            name=data["name"],
            config_ids=frozenset(data.get("config_ids") or ()),
            plan_id=plan_id if plan_id is not None else data.get("plan_id"),
            status_counts=counts or None,
        )


@dataclass
class RunStatusSummary:
    """Per-status test counts for one run."""
    run_id: int
    counts: dict[str, int] = field(default_factory=dict)

    def has_status(self, status: Status) -> bool:
        """True if any test in the run received this status."""
        return self.counts.get(status.counter_name, 0) > 0
