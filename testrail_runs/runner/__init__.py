"""Runner module - run selection."""

from .selector import RunSelector, SelectionResult, matches_configurations

__all__ = [
    "RunSelector",
    "SelectionResult",
    "matches_configurations",
]
