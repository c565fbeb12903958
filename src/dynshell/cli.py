"""Command-line entry point for dynshell."""

import logging
from pathlib import Path

import click

from .config import ShellConfig
from .shell import run_shell

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str) -> None:
    """Configure root logging once for the shell process."""
    logging.basicConfig(level=getattr(logging, level, logging.WARNING), format=LOG_FORMAT)
    # botocore is chatty at DEBUG; keep it to warnings unless asked for
    if level != "DEBUG":
        logging.getLogger("botocore").setLevel(logging.WARNING)
        logging.getLogger("aiobotocore").setLevel(logging.WARNING)


@click.command()
@click.version_option(package_name="dynshell")
@click.option(
    "--region",
    "-r",
    help="AWS region (default: use boto3 defaults)",
)
@click.option(
    "--endpoint-url",
    help=(
        "AWS endpoint URL "
        "(e.g., http://localhost:4566 for LocalStack, or http://localhost:8000 for DynamoDB Local)"
    ),
)
@click.option(
    "--history-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="File that persists shell history (default: .dynshell_history)",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase log verbosity (-v: INFO, -vv: DEBUG)",
)
def cli(
    region: str | None,
    endpoint_url: str | None,
    history_file: Path | None,
    verbose: int,
) -> None:
    """Interactive shell for exploring DynamoDB tables."""
    log_level = {0: None, 1: "INFO"}.get(verbose, "DEBUG")
    config = ShellConfig.from_environment().override(
        region=region,
        endpoint_url=endpoint_url,
        history_file=history_file,
        log_level=log_level,
    )
    configure_logging(config.log_level)
    if config.region:
        click.echo(f"setting region to {config.region}")

    run_shell(config)


def main() -> None:
    cli()
