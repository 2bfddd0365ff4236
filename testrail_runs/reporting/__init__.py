"""Reporting module - output rendering."""

from .run_reporter import FORMATS, RunReporter

__all__ = ["FORMATS", "RunReporter"]
