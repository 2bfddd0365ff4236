"""TestRail API operations used by the run selector.

Wraps a Transport (real HTTP or the in-memory mock) and turns raw
payloads into schema objects. Lookup failures raise RunSelectionError;
transport failures propagate untouched.
"""

from typing import Any, Iterable, Optional

from ..errors import ErrorKind, RunSelectionError
from ..transport.http_client import Transport
from .schema import Configuration, Plan, Project, Run, RunStatusSummary, Status

API_PREFIX = "/api/v2/"


class TestRailApi:
    """Read-only view of a TestRail instance."""

    __test__ = False

    def __init__(self, transport: Transport):
        self.transport = transport

    # -- lookups ---------------------------------------------------------

    def resolve_project(self, name: str) -> Project:
        """Find a project by exact name.

        Raises:
            RunSelectionError: PROJECT_NOT_FOUND if no project has that name.
        """
        for data in self._get_list("get_projects", "projects"):
            if data.get("name") == name:
                return Project(id=data["id"], name=data["name"])

        raise RunSelectionError(
            ErrorKind.PROJECT_NOT_FOUND, f"Project '{name}' not found"
        )

    def list_configurations(self, project_id: int) -> list[Configuration]:
        """All configurations of a project, flattened across groups."""
        configs = []
        for group in self.transport.get(f"get_configs/{project_id}") or []:
            for data in group.get("configs") or []:
                configs.append(Configuration(
                    id=data["id"],
                    name=data["name"],
                    group_id=data.get("group_id", group.get("id")),
                ))
        return configs

    def resolve_configurations(self, project_id: int, names: list[str]) -> list[int]:
        """Translate configuration names into configuration IDs.

        Every configuration whose name equals a requested name contributes
        its ID. The result must be exactly as long as ``names``.

        Raises:
            RunSelectionError: CONFIG_NOT_FOUND on any mismatch.
        """
        if not names:
            return []

        available = self.list_configurations(project_id)
        config_ids = [
            config.id
            for name in names
            for config in available
            if config.name == name
        ]

        if len(config_ids) != len(names):
            known = {config.name for config in available}
            missing = [name for name in names if name not in known]
            if missing:
                message = "One or more configurations does not exist: " + ", ".join(missing)
            else:
                message = "Configuration names match more than one configuration: " + ", ".join(names)
            raise RunSelectionError(ErrorKind.CONFIG_NOT_FOUND, message)
        return config_ids

    def list_statuses(self) -> list[Status]:
        return [
            Status(
                id=data["id"],
                name=data["name"],
                label=data.get("label", ""),
                is_system=data.get("is_system", True),
            )
            for data in self.transport.get("get_statuses") or []
        ]

    def resolve_statuses(self, names: list[str]) -> list[Status]:
        """Translate status names (system name or label) into Status objects.

        Raises:
            RunSelectionError: STATUS_NOT_FOUND for any unknown name.
        """
        if not names:
            return []

        available = self.list_statuses()
        resolved = []
        unknown = []
        for name in names:
            status = (
                next((s for s in available if s.name == name), None)
                or next((s for s in available if s.label == name), None)
            )
            if status is None:
                unknown.append(name)
            else:
                resolved.append(status)

        if unknown:
            raise RunSelectionError(
                ErrorKind.STATUS_NOT_FOUND,
                f"Unknown status: {', '.join(unknown)}",
            )
        return resolved

    # -- listings --------------------------------------------------------

    def list_runs(self, project_id: int) -> list[Run]:
        """Standalone runs of a project (plan runs are not included)."""
        return [
            Run.from_payload(data)
            for data in self._get_list(f"get_runs/{project_id}", "runs")
        ]

    def list_plans(self, project_id: int) -> list[Plan]:
        return [
            Plan(id=data["id"], name=data.get("name", ""))
            for data in self._get_list(f"get_plans/{project_id}", "plans")
        ]

    def list_child_runs(self, plan: Plan) -> list[Run]:
        """Runs of every entry of a plan, in entry order."""
        detail = self.transport.get(f"get_plan/{plan.id}") or {}
        return [
            Run.from_payload(data, plan_id=plan.id)
            for entry in detail.get("entries") or []
            for data in entry.get("runs") or []
        ]

    def summarize_run_statuses(self, runs: Iterable[Run]) -> dict[int, RunStatusSummary]:
        """Per-status counts for each run, keyed by run ID.

        Runs whose payload carried no status counters get no summary.
        """
        return {
            run.id: RunStatusSummary(run_id=run.id, counts=dict(run.status_counts))
            for run in runs
            if run.status_counts is not None
        }

    # -- helpers ---------------------------------------------------------

    def _get_list(self, endpoint: str, key: str) -> list[dict[str, Any]]:
        """Fetch every page of a list endpoint.

        Handles both paginated responses (TestRail 6.7+) and bare lists.
        """
        items: list[dict[str, Any]] = []
        next_endpoint: Optional[str] = endpoint

        while next_endpoint:
            data = self.transport.get(next_endpoint)
            if isinstance(data, list):
                items.extend(data)
                break

            items.extend(data.get(key) or [])
            next_link = (data.get("_links") or {}).get("next")
            next_endpoint = _strip_api_prefix(next_link) if next_link else None

        return items


def _strip_api_prefix(link: str) -> str:
    """Turn a '_links.next' value into an endpoint for Transport.get."""
    if link.startswith(API_PREFIX):
        return link[len(API_PREFIX):]
    return link.lstrip("/")
