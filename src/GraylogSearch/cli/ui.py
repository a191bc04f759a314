"""Click CLI interface definitions.

Defines the command-line interface and routes each command to the runner.
"""

from __future__ import annotations

from pathlib import Path

import click
from dotenv import load_dotenv

from GraylogSearch.cli.commands import (
    FieldHistogramsCommand,
    HistogramsCommand,
    MessageCommand,
    StatsCompareCommand,
    TermsCommand,
)
from GraylogSearch.cli.runner import CommandRunner
from GraylogSearch.config import DEFAULT_CONFIG_PATH, load_config_with_defaults
from GraylogSearch.core.models import TIMESTAMP_PATTERN, TimeUnit

_INTERVALS = click.Choice([unit.value for unit in TimeUnit], case_sensitive=False)


def _time_options(func):
    func = click.option("--to", "to_text", required=True, help=f"Window end ({TIMESTAMP_PATTERN}).")(func)
    func = click.option("--from", "from_text", required=True, help=f"Window start ({TIMESTAMP_PATTERN}).")(func)
    return func


@click.group(help="GraylogSearch: run Graylog searches and print the results.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Path to YAML config file, merged over the defaults.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path) -> None:
    """CLI entry group.

    Loads environment variables from .env file before processing config.
    """
    load_dotenv()
    ctx.obj = CommandRunner(load_config_with_defaults(config_path))


@cli.command("message")
@click.argument("request_id")
@click.pass_context
def message_cmd(ctx: click.Context, request_id: str) -> None:
    """Show the message logged for REQUEST_ID; exit code 1 when not found."""
    result = ctx.obj.run(ctx.command.name, MessageCommand(request_id=request_id))
    if result is None:
        ctx.exit(1)


@cli.command("stats-compare")
@click.option("--field", default="source", show_default=True, help="Field to compute statistics on.")
@click.pass_context
def stats_compare_cmd(ctx: click.Context, field: str) -> None:
    """Compare last-day and last-week statistics of fast finished requests."""
    ctx.obj.run(ctx.command.name, StatsCompareCommand(field=field))


@cli.command("histograms")
@click.option("--interval", type=_INTERVALS, required=True, help="Histogram bucket interval.")
@_time_options
@click.pass_context
def histograms_cmd(ctx: click.Context, interval: str, from_text: str, to_text: str) -> None:
    """Message histograms split by process time."""
    ctx.obj.run(ctx.command.name, HistogramsCommand(interval=interval, from_text=from_text, to_text=to_text))


@cli.command("field-histograms")
@click.option("--size", type=click.IntRange(min=1), required=True, help="Number of top sources.")
@click.option("--interval", type=_INTERVALS, required=True, help="Histogram bucket interval.")
@_time_options
@click.pass_context
def field_histograms_cmd(ctx: click.Context, size: int, interval: str, from_text: str, to_text: str) -> None:
    """Process time field histograms of the top requesting sources."""
    command = FieldHistogramsCommand(size=size, interval=interval, from_text=from_text, to_text=to_text)
    ctx.obj.run(ctx.command.name, command)


@cli.command("terms")
@click.option("--size", type=click.IntRange(min=1), required=True, help="Number of ranked values.")
@_time_options
@click.option("--field", default="request_path", show_default=True, help="Field to rank.")
@click.option("--order", type=click.Choice(["desc", "asc"]), default="desc", show_default=True)
@click.option("--top-values-only", is_flag=True, default=False, help="Only return the top values.")
@click.pass_context
def terms_cmd(
    ctx: click.Context,
    size: int,
    from_text: str,
    to_text: str,
    field: str,
    order: str,
    top_values_only: bool,
) -> None:
    """Rank request paths (or another field) by usage."""
    command = TermsCommand(
        size=size,
        from_text=from_text,
        to_text=to_text,
        field=field,
        order=order,
        top_values_only=top_values_only,
    )
    ctx.obj.run(ctx.command.name, command)
