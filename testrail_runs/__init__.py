"""testrail-runs - list TestRail runs by configuration and result status."""

__version__ = "0.1.0"
