"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
slug output, step reports, and locale listings.
"""

from __future__ import annotations

from typing import Mapping, NoReturn

import typer

from .errors import CommandStageError
from .text.pipeline import SlugReport


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, CommandStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_step_report(report: SlugReport) -> None:
    """Print each intermediate value of a normalization run."""

    for index, (step, text) in enumerate(report.steps, start=1):
        typer.echo(f"{index}. {step}: {text!r}")


def echo_locale_list(tables: Mapping[str, Mapping[str, str]]) -> None:
    """Print registered locale tags with their entry counts in sorted order."""

    for locale in sorted(tables):
        typer.echo(f"{locale} ({len(tables[locale])} entries)")
