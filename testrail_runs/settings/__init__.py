"""Settings module - credentials and invocation inputs."""

from .loader import (
    Settings,
    default_config_path,
    load_config_file,
    resolve_settings,
)

__all__ = [
    "Settings",
    "default_config_path",
    "load_config_file",
    "resolve_settings",
]
