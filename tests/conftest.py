"""Shared fixtures for testrail-runs tests."""

import pytest

from testrail_runs.api.client import TestRailApi
from testrail_runs.transport.mock_transport import MockTransport


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep the user's ~/.testrail and TESTRAIL_* variables out of tests."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    for name in ("TESTRAIL_APIURL", "TESTRAIL_USER", "TESTRAIL_PASSWORD"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def widgets_transport() -> MockTransport:
    return MockTransport()


@pytest.fixture
def widgets_api(widgets_transport) -> TestRailApi:
    return TestRailApi(widgets_transport)
