"""Tests for runner/selector.py - run collection, matching and status filtering."""

import pytest

from testrail_runs.api.client import TestRailApi
from testrail_runs.api.schema import Project, Run
from testrail_runs.errors import ErrorKind, RunSelectionError
from testrail_runs.runner.selector import RunSelector, matches_configurations
from testrail_runs.settings.loader import Settings
from testrail_runs.transport.mock_transport import MockTransport

from .factories import make_dataset, make_plan, make_run

WIDGETS = Project(id=1, name="Widgets")


def _selector(dataset=None) -> tuple[RunSelector, MockTransport]:
    transport = MockTransport(dataset)
    return RunSelector(TestRailApi(transport)), transport


class TestMatchesConfigurations:
    """A plan run matches only when its configuration set equals the filter."""

    def test_subset_filter_does_not_match(self):
        run = Run(id=1, name="r", config_ids=frozenset({1, 2}))
        assert not matches_configurations(run, [1])

    def test_equal_sets_match(self):
        run = Run(id=1, name="r", config_ids=frozenset({1, 2}))
        assert matches_configurations(run, [2, 1])

    def test_superset_filter_does_not_match(self):
        run = Run(id=1, name="r", config_ids=frozenset({1}))
        assert not matches_configurations(run, [1, 2])

    def test_same_size_different_ids_do_not_match(self):
        run = Run(id=1, name="r", config_ids=frozenset({1, 3}))
        assert not matches_configurations(run, [1, 2])

    def test_empty_filter_matches_only_unconfigured_runs(self):
        assert matches_configurations(Run(id=1, name="r"), [])
        assert not matches_configurations(
            Run(id=2, name="r", config_ids=frozenset({1})), []
        )


class TestSelectEndToEnd:
    """Full selection against the built-in Widgets dataset."""

    def test_config_filter_selects_matching_plan_run_only(self):
        selector, _ = _selector()
        result = selector.select(Settings(project="Widgets", configs=("Linux",), mock=True))

        assert result.run_names == ["PlanA-Linux"]
        assert result.project == WIDGETS

    def test_no_filter_includes_standalone_runs(self):
        selector, _ = _selector()
        result = selector.select(Settings(project="Widgets", mock=True))

        assert result.run_names == ["Nightly"]

    def test_unknown_configuration_fails(self):
        selector, _ = _selector()
        with pytest.raises(RunSelectionError) as exc_info:
            selector.select(Settings(project="Widgets", configs=("Linux", "MacOS")))

        assert exc_info.value.kind is ErrorKind.CONFIG_NOT_FOUND

    def test_unknown_project_fails(self):
        selector, _ = _selector()
        with pytest.raises(RunSelectionError) as exc_info:
            selector.select(Settings(project="Gadgets"))

        assert exc_info.value.kind is ErrorKind.PROJECT_NOT_FOUND

    def test_unknown_status_fails_before_any_other_request(self):
        selector, transport = _selector()
        with pytest.raises(RunSelectionError) as exc_info:
            selector.select(Settings(project="Gadgets", statuses=("exploded",)))

        assert exc_info.value.kind is ErrorKind.STATUS_NOT_FOUND
        assert transport.requests == ["get_statuses"]

    def test_selection_is_repeatable(self):
        settings = Settings(project="Widgets", statuses=("passed",))
        first, _ = _selector()
        second, _ = _selector()

        assert first.select(settings).run_names == second.select(settings).run_names

    def test_progress_messages(self):
        messages = []
        selector = RunSelector(TestRailApi(MockTransport()), on_progress=messages.append)
        selector.select(Settings(project="Widgets"))

        assert "Project: Widgets (id 1)" in messages
        assert messages[-1] == "Matched 1 run(s)"


class TestCollectRuns:
    """Standalone vs plan run collection."""

    def test_standalone_runs_excluded_when_filtering(self):
        dataset = make_dataset(
            runs=[make_run(1, "PlanA-Linux")],
            plans=[make_plan(10, [make_run(2, "PlanA-Linux", [1])])],
        )
        selector, transport = _selector(dataset)

        runs = selector.collect_runs(WIDGETS, [1], config_filter=True)

        assert [r.id for r in runs] == [2]
        assert not any(r.startswith("get_runs") for r in transport.requests)

    def test_standalone_runs_come_first(self):
        dataset = make_dataset(
            runs=[make_run(1, "Smoke"), make_run(2, "Nightly")],
            plans=[make_plan(10, [make_run(3, "Unconfigured")])],
        )
        selector, _ = _selector(dataset)

        runs = selector.collect_runs(WIDGETS, [], config_filter=False)

        assert [r.name for r in runs] == ["Smoke", "Nightly", "Unconfigured"]

    def test_plan_order_then_entry_order(self):
        dataset = make_dataset(
            runs=[],
            plans=[
                make_plan(10, [make_run(1, "A1", [1])], [make_run(2, "A2", [1])]),
                make_plan(20, [make_run(3, "B1", [1]), make_run(4, "B2", [2])]),
            ],
        )
        selector, _ = _selector(dataset)

        runs = selector.collect_runs(WIDGETS, [1], config_filter=True)

        assert [r.name for r in runs] == ["A1", "A2", "B1"]
        assert all(r.plan_id in (10, 20) for r in runs)

    def test_plan_without_entries_is_skipped(self):
        dataset = make_dataset(
            plans=[
                {"id": 10, "name": "Empty"},
                make_plan(20, [make_run(1, "Linux run", [1])]),
            ],
        )
        selector, transport = _selector(dataset)

        runs = selector.collect_runs(WIDGETS, [1], config_filter=True)

        assert [r.name for r in runs] == ["Linux run"]
        assert "get_plan/10" in transport.requests

    def test_multi_config_run_requires_full_filter(self):
        dataset = make_dataset(
            configs={1: "Linux", 2: "Chrome"},
            plans=[make_plan(10, [
                make_run(1, "Linux+Chrome", [1, 2]),
                make_run(2, "Linux", [1]),
            ])],
        )
        selector, _ = _selector(dataset)

        both = selector.select(Settings(project="Widgets", configs=("Linux", "Chrome")))
        linux = selector.select(Settings(project="Widgets", configs=("Linux",)))

        assert both.run_names == ["Linux+Chrome"]
        assert linux.run_names == ["Linux"]


class TestFilterByStatus:
    """Status filtering composes requested statuses with AND."""

    @pytest.fixture
    def selector(self):
        dataset = make_dataset(
            runs=[
                make_run(1, "Green", passed=4, failed=0),
                make_run(2, "Mixed", passed=2, failed=1),
                make_run(3, "Red", passed=0, failed=3),
                make_run(4, "No counters"),
            ],
            plans=[],
        )
        selector, _ = _selector(dataset)
        return selector

    def test_single_status(self, selector):
        result = selector.select(Settings(project="Widgets", statuses=("passed",)))
        assert result.run_names == ["Green", "Mixed"]

    def test_all_statuses_required(self, selector):
        result = selector.select(Settings(project="Widgets", statuses=("passed", "failed")))
        assert result.run_names == ["Mixed"]

    def test_status_by_label(self, selector):
        result = selector.select(Settings(project="Widgets", statuses=("Failed",)))
        assert result.run_names == ["Mixed", "Red"]

    def test_no_statuses_is_passthrough(self, selector):
        result = selector.select(Settings(project="Widgets"))
        assert result.run_names == ["Green", "Mixed", "Red", "No counters"]

    def test_run_without_summary_is_dropped(self, selector):
        result = selector.select(Settings(project="Widgets", statuses=("untested",)))
        assert result.run_names == []

    def test_passed_only_run_dropped_when_failed_also_requested(self):
        runs = [Run(id=1, name="r", status_counts={"passed": 1, "failed": 0})]
        selector, _ = _selector()
        api = selector.api
        passed, failed = api.resolve_statuses(["passed", "failed"])

        assert selector.filter_by_status(runs, [passed, failed]) == []
        assert selector.filter_by_status(runs, [passed]) == runs

    def test_renamed_custom_status_uses_its_slot_counter(self):
        dataset = make_dataset(
            runs=[
                make_run(1, "Approved run", passed=1, custom_status1=2),
                make_run(2, "Pending run", passed=1, custom_status1=0),
            ],
            plans=[],
        )
        dataset["statuses"].append(
            {"id": 6, "name": "approved", "label": "Approved", "is_system": False}
        )
        selector, _ = _selector(dataset)

        by_name = selector.select(Settings(project="Widgets", statuses=("approved",)))
        by_label = selector.select(Settings(project="Widgets", statuses=("Approved", "passed")))

        assert by_name.run_names == ["Approved run"]
        assert by_label.run_names == ["Approved run"]
