"""Error kinds raised by the run selection pipeline.

Each stage raises RunSelectionError tagged with an ErrorKind. The kind's
value is the process exit code; only the CLI turns it into one.
"""

from enum import IntEnum


class ErrorKind(IntEnum):
    """Failure categories, valued by exit code."""
    MISSING_INPUT = 1
    STATUS_NOT_FOUND = 4
    PROJECT_NOT_FOUND = 6
    CONFIG_NOT_FOUND = 7

    @property
    def exit_code(self) -> int:
        return int(self.value)


class RunSelectionError(Exception):
    """A lookup or input failure that aborts the pipeline."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        return self.message
