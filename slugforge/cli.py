"""Command-line interface for slugforge.

Responsibilities:
- Expose user-facing commands for slug, token, and transliteration output.
- Convert CLI arguments and config sources into `NormalizeOptions`.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import replace
import sys
from pathlib import Path
from typing import Annotated, Iterator

from loguru import logger
import typer

from .cli_rendering import echo_locale_list, echo_step_report, exit_with_command_error
from .config import ConfigLoader, NormalizeOptions, SlugforgeConfig
from .errors import CommandStageError, UnknownLocaleError
from .telemetry.logger import RunLogger
from .text.backend import DefaultUnicodeBackend
from .text.characters import approximations
from .text.identifier import Identifier
from .text.pipeline import SlugNormalizer, SlugReport, identifier_token_options

app = typer.Typer(
    name="slugforge",
    no_args_is_help=True,
    help="slugforge CLI.",
)

TextArgument = Annotated[
    list[str] | None,
    typer.Argument(help="Text to convert; words are joined with spaces. Reads stdin when omitted."),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Path to YAML config file with normalization defaults."),
]
LocaleOption = Annotated[
    list[str] | None,
    typer.Option(
        "--locale",
        "-l",
        help="Approximation locale (repeatable; later locales win), e.g. `german`.",
    ),
]
TraceOption = Annotated[
    bool,
    typer.Option("--trace", help="Log every normalization step to stderr."),
]


def _load_config(config_path: Path | None) -> SlugforgeConfig:
    """Load YAML config when requested, environment config otherwise."""

    if config_path is None:
        try:
            return ConfigLoader.from_env()
        except ValueError as exc:
            raise CommandStageError(
                stage="config",
                detail=f"Invalid environment configuration: {exc}",
                hint="Fix or unset the offending `SLUGFORGE_*` variable.",
            ) from exc

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise CommandStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise CommandStageError(
            stage="config",
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc
    except OSError as exc:
        raise CommandStageError(
            stage="config",
            detail=f"Failed to read config file `{config_path}`: {exc}",
            hint="Verify file permissions.",
        ) from exc


def _read_input(text: list[str] | None) -> str | bytes:
    """Join positional words, or read raw stdin bytes when none are given."""

    if text:
        return " ".join(text)
    raw = typer.get_binary_stream("stdin").read()
    return raw.rstrip(b"\r\n")


def _prepare(config_path: Path | None) -> tuple[SlugforgeConfig, DefaultUnicodeBackend]:
    """Load config, register its approximations, and build the backend."""

    config = _load_config(config_path)
    config.register_approximations(approximations)
    return config, DefaultUnicodeBackend(legacy_encodings=config.legacy_encodings)


def _resolve_options(
    base: NormalizeOptions,
    locales: list[str] | None,
    transliterate: bool | None,
    to_ascii: bool | None,
    max_length: int | None,
    separator: str | None,
) -> NormalizeOptions:
    """Apply explicit CLI overrides on top of configured options."""

    overrides: dict[str, object] = {}
    if locales:
        overrides["transliterations"] = tuple(locales)
    if transliterate is not None:
        overrides["transliterate"] = transliterate
    if to_ascii is not None:
        overrides["to_ascii"] = to_ascii
    if max_length is not None:
        overrides["max_length"] = max_length
    if separator is not None:
        overrides["separator"] = separator
    options = replace(base, **overrides)
    try:
        options.validate()
    except ValueError as exc:
        raise CommandStageError(
            stage="options",
            detail=str(exc),
            hint="Check `--max-length` and `--separator` values.",
        ) from exc
    return options


@contextmanager
def _trace_session(enabled: bool) -> Iterator[RunLogger | None]:
    """Route library debug logs and step events to stderr for one command.

    Existing handlers are replaced for the session so every event is printed
    once; the default stderr handler is reinstated afterwards.
    """

    if not enabled:
        yield None
        return

    stderr = sys.stderr
    logger.remove()
    logger.enable("slugforge")
    handler_id = logger.add(
        stderr,
        format="{level} {name}: {message}",
        level="DEBUG",
        colorize=False,
        filter=lambda record: record["name"].startswith("slugforge")
        and "slugforge_run" not in record["extra"],
    )
    run_logger = RunLogger(sink=stderr)
    try:
        yield run_logger
    finally:
        run_logger.close()
        logger.remove(handler_id)
        logger.disable("slugforge")
        logger.add(sys.stderr)


def _normalize_input(
    text: list[str] | None,
    options: NormalizeOptions,
    backend: DefaultUnicodeBackend,
    trace: bool,
) -> SlugReport:
    """Repair the input and run the normalizer, tracing steps when requested."""

    with _trace_session(trace) as run_logger:
        identifier = Identifier(_read_input(text), backend=backend)
        normalizer = SlugNormalizer(options, backend=backend, run_logger=run_logger)
        return normalizer.run_with_report(identifier.text)


@app.command("slug")
def slug_command(
    text: TextArgument = None,
    config_file: ConfigOption = None,
    locale: LocaleOption = None,
    transliterate: Annotated[
        bool | None,
        typer.Option(
            "--transliterate/--no-transliterate",
            help="Approximate accented and foreign characters before cleaning.",
        ),
    ] = None,
    to_ascii: Annotated[
        bool | None,
        typer.Option("--to-ascii/--no-to-ascii", help="Drop every remaining non-ASCII character."),
    ] = None,
    max_length: Annotated[
        int | None,
        typer.Option("--max-length", help="Maximum slug length in UTF-8 bytes."),
    ] = None,
    separator: Annotated[
        str | None,
        typer.Option("--separator", help="Replacement for whitespace between words."),
    ] = None,
    show_steps: Annotated[
        bool,
        typer.Option("--show-steps", help="Print the value after every normalization step."),
    ] = False,
    trace: TraceOption = False,
) -> None:
    """Print the URL slug for the given text."""

    try:
        config, backend = _prepare(config_file)
        options = _resolve_options(
            config.normalize_options(),
            locales=locale,
            transliterate=transliterate,
            to_ascii=to_ascii,
            max_length=max_length,
            separator=separator,
        )
        report = _normalize_input(text, options, backend, trace)
    except (CommandStageError, UnknownLocaleError, ValueError) as exc:
        exit_with_command_error("slug", exc)

    if show_steps:
        echo_step_report(report)
    typer.echo(report.slug)


@app.command("token")
def token_command(
    text: TextArgument = None,
    config_file: ConfigOption = None,
    locale: LocaleOption = None,
    max_length: Annotated[
        int | None,
        typer.Option("--max-length", help="Maximum token length in bytes."),
    ] = None,
    trace: TraceOption = False,
) -> None:
    """Print an ASCII, underscore-separated token usable as a method name."""

    try:
        config, backend = _prepare(config_file)
        options = _resolve_options(
            replace(
                identifier_token_options(),
                transliterations=config.normalize_options().transliterations,
                max_length=config.max_length,
            ),
            locales=locale,
            transliterate=None,
            to_ascii=None,
            max_length=max_length,
            separator=None,
        )
        token = _normalize_input(text, options, backend, trace).slug
    except (CommandStageError, UnknownLocaleError, ValueError) as exc:
        exit_with_command_error("token", exc)

    typer.echo(token)


@app.command("transliterate")
def transliterate_command(
    text: TextArgument = None,
    config_file: ConfigOption = None,
    locale: LocaleOption = None,
) -> None:
    """Print the text with accented and foreign characters approximated."""

    try:
        config, backend = _prepare(config_file)
        transliterations = tuple(locale) if locale else config.transliterations or None
        identifier = Identifier(_read_input(text), backend=backend)
        result = identifier.transliterate(transliterations)
    except (CommandStageError, UnknownLocaleError, ValueError) as exc:
        exit_with_command_error("transliterate", exc)

    typer.echo(result.text)


@app.command("locales")
def locales_command(config_file: ConfigOption = None) -> None:
    """List registered approximation locales."""

    try:
        _prepare(config_file)
    except CommandStageError as exc:
        exit_with_command_error("locales", exc)

    echo_locale_list(approximations.snapshot())


def main() -> None:
    """Run the slugforge CLI application."""

    app()
