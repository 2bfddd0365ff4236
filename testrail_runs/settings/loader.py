"""Settings resolution for the run selector.

Each connection value is taken from the first source that has it:
CLI flag, environment variable, config file, interactive prompt.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Optional, Union

import click

from ..errors import ErrorKind, RunSelectionError

CONFIG_FILE_NAME = ".testrail"
CONFIG_KEYS = ("apiurl", "user", "password")
ENV_VARS = {
    "apiurl": "TESTRAIL_APIURL",
    "user": "TESTRAIL_USER",
    "password": "TESTRAIL_PASSWORD",
}
PROMPTS = {
    "project": "Project",
    "apiurl": "TestRail URL",
    "user": "User",
    "password": "Password",
}


@dataclass(frozen=True)
class Settings:
    """Immutable inputs for one invocation."""
    project: str
    configs: tuple[str, ...] = ()
    statuses: tuple[str, ...] = ()
    apiurl: str = ""
    user: str = ""
    password: str = ""
    mock: bool = False

    @property
    def has_config_filter(self) -> bool:
        return len(self.configs) > 0


def default_config_path() -> Path:
    return Path.home() / CONFIG_FILE_NAME


def load_config_file(file_path: Union[str, Path]) -> dict[str, str]:
    """Read key=value lines for apiurl, user and password.

    Blank lines and '#' comments are skipped; other keys are ignored.

    Raises:
        FileNotFoundError: If the file doesn't exist.
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")

    values: dict[str, str] = {}
    with open(file_path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            key = key.strip()
            if key in CONFIG_KEYS:
                values[key] = value.strip()

    return values


def resolve_settings(
    project: Optional[str],
    configs: tuple[str, ...] = (),
    statuses: tuple[str, ...] = (),
    apiurl: Optional[str] = None,
    user: Optional[str] = None,
    password: Optional[str] = None,
    mock: bool = False,
    config_file: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
    prompt: Callable[..., str] = click.prompt,
) -> Settings:
    """Build Settings from flags, environment, config file and prompts.

    Args:
        config_file: Explicit credentials file. Must exist if given; the
            default ~/.testrail is read only when present.
        environ: Environment mapping (defaults to os.environ).
        prompt: Interactive fallback, called like click.prompt.

    Raises:
        RunSelectionError: MISSING_INPUT if a required value is still
            blank after prompting.
        FileNotFoundError: If an explicit config_file doesn't exist.
    """
    environ = os.environ if environ is None else environ

    if config_file is not None:
        file_values = load_config_file(config_file)
    elif default_config_path().exists():
        file_values = load_config_file(default_config_path())
    else:
        file_values = {}

    flags = {"apiurl": apiurl, "user": user, "password": password}
    connection = {}
    for key in CONFIG_KEYS:
        connection[key] = (
            flags[key]
            or environ.get(ENV_VARS[key])
            or file_values.get(key)
            or ""
        )

    required = ["project"] if mock else ["project", *CONFIG_KEYS]
    values = {"project": project or "", **connection}
    for key in required:
        if not values[key]:
            values[key] = _ask(prompt, key)

    return Settings(
        project=values["project"],
        configs=tuple(configs),
        statuses=tuple(statuses),
        apiurl=values["apiurl"],
        user=values["user"],
        password=values["password"],
        mock=mock,
    )


def _ask(prompt: Callable[..., str], key: str) -> str:
    answer = prompt(
        PROMPTS[key],
        default="",
        show_default=False,
        hide_input=key == "password",
    )
    answer = (answer or "").strip()
    if not answer:
        raise RunSelectionError(
            ErrorKind.MISSING_INPUT, f"Missing required value: {key}"
        )
    return answer
