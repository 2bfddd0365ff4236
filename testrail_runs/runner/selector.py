"""Run selector - orchestrates run lookup and filtering.

Coordinates the full selection flow:
1. Resolve status names
2. Resolve the project
3. Resolve configuration names
4. Collect standalone and plan runs
5. Keep plan runs whose configurations match exactly
6. Filter by status
"""

from dataclasses import dataclass, field
from typing import Callable, Optional

from ..api.client import TestRailApi
from ..api.schema import Project, Run, Status
from ..settings.loader import Settings


@dataclass
class SelectionResult:
    """Outcome of a selection."""
    project: Project
    runs: list[Run] = field(default_factory=list)

    @property
    def run_names(self) -> list[str]:
        return [run.name for run in self.runs]


def matches_configurations(run: Run, config_ids: list[int]) -> bool:
    """True if the run is configured for exactly ``config_ids``.

    A run on {A, B} does not match a filter of {A}.
    """
    return (
        len(run.config_ids) == len(config_ids)
        and all(config_id in run.config_ids for config_id in config_ids)
    )


class RunSelector:
    """Selects the runs of a project matching configurations and statuses."""

    def __init__(
        self,
        api: TestRailApi,
        on_progress: Optional[Callable[[str], None]] = None,
    ):
        """Initialize run selector.

        Args:
            api: TestRail API facade.
            on_progress: Optional callback(message) for progress reporting.
        """
        self.api = api
        self.on_progress = on_progress

    def select(self, settings: Settings) -> SelectionResult:
        """Run the whole selection for one set of inputs.

        Raises:
            RunSelectionError: On unknown statuses, project or configurations.
        """
        statuses = self.api.resolve_statuses(list(settings.statuses))

        project = self.api.resolve_project(settings.project)
        self._progress(f"Project: {project.name} (id {project.id})")

        config_ids = self.api.resolve_configurations(project.id, list(settings.configs))
        if config_ids:
            self._progress(f"Configuration filter: {sorted(config_ids)}")

        runs = self.collect_runs(project, config_ids, settings.has_config_filter)
        runs = self.filter_by_status(runs, statuses)

        self._progress(f"Matched {len(runs)} run(s)")
        return SelectionResult(project=project, runs=runs)

    def collect_runs(
        self,
        project: Project,
        config_ids: list[int],
        config_filter: bool,
    ) -> list[Run]:
        """Gather standalone runs and configuration-matching plan runs.

        Standalone runs carry no configurations, so they are only
        considered when no configuration filter is active.
        """
        runs: list[Run] = []
        if not config_filter:
            runs.extend(self.api.list_runs(project.id))
            self._progress(f"Standalone runs: {len(runs)}")

        plans = self.api.list_plans(project.id)
        self._progress(f"Plans: {len(plans)}")

        for plan in plans:
            children = self.api.list_child_runs(plan)
            if not children:
                continue
            runs.extend(
                run for run in children
                if matches_configurations(run, config_ids)
            )

        return runs

    def filter_by_status(self, runs: list[Run], statuses: list[Status]) -> list[Run]:
        """Keep runs that have at least one test in every requested status."""
        if not statuses:
            return runs

        summaries = self.api.summarize_run_statuses(runs)
        runs = [run for run in runs if run.id in summaries]

        for status in statuses:
            runs = [run for run in runs if summaries[run.id].has_status(status)]

        return runs

    def _progress(self, message: str) -> None:
        if self.on_progress:
            self.on_progress(message)
