"""CLI entry point for the TestRail run selector.

    testrail-runs -j <project> [-c <config>]... [-s <status>]... [options]

Prints the names of matching runs, one per line. Errors go to stderr and
exit with the code of their ErrorKind.
"""

import sys
from typing import Optional

import click
import yaml

from .api.client import TestRailApi
from .errors import ErrorKind, RunSelectionError
from .reporting.run_reporter import FORMATS, RunReporter
from .runner.selector import RunSelector
from .settings.loader import Settings, resolve_settings
from .transport.http_client import TestRailHttpClient
from .transport.mock_transport import MockTransport, load_mock_data


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-j", "--project", help="Project name.")
@click.option("-c", "--config", "configs", multiple=True,
              help="Configuration name (repeatable). Runs must match the set exactly.")
@click.option("-s", "--status", "statuses", multiple=True,
              help="Status name (repeatable). Runs must have tests in every status.")
@click.option("--apiurl", help="TestRail URL.")
@click.option("--user", help="TestRail user.")
@click.option("--password", help="TestRail password or API key.")
@click.option("--mock", is_flag=True, help="Use in-memory fake data instead of the network.")
@click.option("--mock-data", type=click.Path(dir_okay=False),
              help="YAML fixture for --mock (implies --mock).")
@click.option("--config-file", type=click.Path(dir_okay=False),
              help="Credentials file (default: ~/.testrail).")
@click.option("--format", "output_format", type=click.Choice(FORMATS),
              default="text", show_default=True, help="Output format.")
@click.option("-v", "--verbose", is_flag=True, help="Print progress to stderr.")
def main(
    project: Optional[str],
    configs: tuple[str, ...],
    statuses: tuple[str, ...],
    apiurl: Optional[str],
    user: Optional[str],
    password: Optional[str],
    mock: bool,
    mock_data: Optional[str],
    config_file: Optional[str],
    output_format: str,
    verbose: bool,
):
    """List TestRail runs filtered by configuration and status."""
    mock = mock or mock_data is not None

    dataset = None
    if mock_data is not None:
        try:
            dataset = load_mock_data(mock_data)
        except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
            fail(f"Failed to load mock data: {e}", ErrorKind.MISSING_INPUT)

    try:
        settings = resolve_settings(
            project=project,
            configs=configs,
            statuses=statuses,
            apiurl=apiurl,
            user=user,
            password=password,
            mock=mock,
            config_file=config_file,
        )
    except FileNotFoundError as e:
        fail(str(e), ErrorKind.MISSING_INPUT)
    except RunSelectionError as e:
        fail(e.message, e.kind)

    on_progress = progress_echo if verbose else None

    with build_transport(settings, dataset) as transport:
        selector = RunSelector(TestRailApi(transport), on_progress=on_progress)
        try:
            result = selector.select(settings)
        except RunSelectionError as e:
            fail(e.message, e.kind)

    output = RunReporter().render(result, output_format)
    if output:
        click.echo(output, nl=False)


def build_transport(settings: Settings, dataset: Optional[dict] = None):
    """Pick the transport once, before any request is made."""
    if settings.mock:
        return MockTransport(dataset)
    return TestRailHttpClient(settings.apiurl, settings.user, settings.password)


def progress_echo(message: str) -> None:
    click.echo(f"  {message}", err=True)


def fail(message: str, kind: ErrorKind):
    """Report an error on stderr and exit with the kind's code."""
    click.echo(f"Error: {message}", err=True)
    sys.exit(kind.exit_code)


if __name__ == "__main__":
    main()
