"""Command-line interface for icpc_scoreboard."""

import logging
from pathlib import Path
from typing import Optional, TextIO

import click
from pydantic import ValidationError

from .commands import run_session
from .config import ScoreboardConfig, load_config
from .contest import ContestState

logger = logging.getLogger(__name__)


@click.command()
@click.version_option(version="1.0.0")
@click.argument("source", type=click.File("r"), default="-")
@click.option(
    "-o",
    "--output",
    type=click.File("w"),
    default="-",
    help="Where to write protocol output (default: stdout).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON file with scoreboard rules.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Diagnostics level (logs go to stderr).",
)
def cli(source: TextIO, output: TextIO, config_path: Optional[Path], log_level: str):
    """icpc-scoreboard - replay a judge command stream and print the scoreboard.

    Reads commands from SOURCE (default: stdin), one per line.
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = ScoreboardConfig()
    if config_path is not None:
        try:
            config = load_config(config_path)
        except ValidationError as exc:
            raise click.BadParameter(str(exc), param_hint="--config")

    state = ContestState(config)
    for line in run_session(state, source):
        click.echo(line, file=output)


def main():
    cli()
