#!/usr/bin/env python3
"""
sqlrun – execute a SQL script statement by statement.

Two ways to describe the target database:

• Positional:   sqlrun <dialect> <url> <username> <password> <script.sql>
• Config file:  sqlrun <config.yml|yaml|toml> [script.sql]

A failing statement is reported and skipped; the exit status is non‑zero only
when the run could not start (bad configuration, missing script or driver,
refused connection).
"""
from __future__ import annotations

import pathlib
import sys

import click

from sqlrun import __version__
from sqlrun.config import DataSource, from_args, load
from sqlrun.constants import CONFIG_SUFFIXES
from sqlrun.driver import open_session
from sqlrun.errors import SetupError
from sqlrun.executor import ExecutionResult, StatementFailure, run
from sqlrun.splitter import read_script, split

USAGE = """\
Usage 1 (command-line arguments):
  sqlrun <dialect> <url> <username> <password> <script.sql>

Usage 2 (configuration file):
  sqlrun <config.yml> [script.sql]

Example configuration:
  datasource:
    dialect: mysql
    url: mysql://localhost:3306/mydb
    username: root
    password: ${DB_PASSWORD}
    driver: mysql.connector
    scriptPath: ./script.sql
"""


def _is_config_file(arg: str) -> bool:
    return pathlib.Path(arg).suffix.lower() in CONFIG_SUFFIXES


def _resolve(args: tuple[str, ...]) -> DataSource:
    if args and len(args) <= 2 and _is_config_file(args[0]):
        click.echo(f"Loading configuration from file: {args[0]}")
        return load(args[0], script_path=args[1] if len(args) == 2 else None)
    if len(args) == 5:
        click.echo("Loading configuration from command-line arguments")
        return from_args(args)
    raise click.UsageError(USAGE)


def _report_failure(failure: StatementFailure) -> None:
    click.echo(f"Error executing statement {failure.position}: {failure.error}", err=True)
    click.echo(f"Failed SQL: {failure.sql}", err=True)


def _report_progress(processed: int, succeeded: int) -> None:
    click.echo(f"Executed {processed} statements, {succeeded} successful")


def _summary(result: ExecutionResult) -> str:
    return (
        f"Execution complete - Total: {result.total}, "
        f"Successful: {result.succeeded}, Failed: {result.failed}"
    )


def execute_script(source: DataSource, *, dry_run: bool = False) -> ExecutionResult | None:
    """Read, split and run the script described by *source*."""
    click.echo(f"Reading SQL script: {source.script_path}")
    statements = split(read_script(source.script_path), source.delimiter)

    if dry_run:
        for pos, stmt in enumerate(statements, start=1):
            click.echo(f"-- [{pos}]\n{stmt}{source.delimiter}")
        click.echo(f"\n-- DRY‑RUN complete ({len(statements)} statements, nothing executed)")
        return None

    with open_session(source) as session:
        click.echo(f"Starting execution of {len(statements)} SQL statements")
        result = run(
            statements,
            session,
            on_progress=_report_progress,
            on_failure=_report_failure,
        )
    click.echo("\n" + _summary(result))
    return result


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("args", nargs=-1)
@click.option("-d", "--delimiter", help="statement delimiter (default ';')")
@click.option("--dry-run", is_flag=True, help="split and print statements only")
@click.version_option(__version__)
def main(args, delimiter, dry_run):
    """Execute a SQL script against MySQL or PostgreSQL."""
    try:
        source = _resolve(args)
        if delimiter is not None:
            source.delimiter = delimiter
        click.echo(f"Configuration: {source!r}")
        source.validate()
        execute_script(source, dry_run=dry_run)
    except SetupError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
