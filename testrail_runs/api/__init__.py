"""API module - TestRail lookups and listings."""

from .client import TestRailApi
from .schema import Configuration, Plan, Project, Run, RunStatusSummary, Status

__all__ = [
    "TestRailApi",
    "Configuration",
    "Plan",
    "Project",
    "Run",
    "RunStatusSummary",
    "Status",
]
