"""Unit tests for the slug normalization pipeline and step logging."""

from __future__ import annotations

import io
import re

import pytest

from slugforge.config import NormalizeOptions
from slugforge.errors import UnknownLocaleError
from slugforge.telemetry.logger import RunLogger
from slugforge.text.identifier import Identifier
from slugforge.text.pipeline import SlugNormalizer, identifier_token_options

_SAMPLES = [
    "Hello   World--foo",
    "¡Feliz año!",
    "Łódź, Poland",
    "日本 Tokyo 2024",
    "  \t tabs\tand\nnewlines\r\n ",
    "Ĳssel ŉ Œuvre",
    "price: 5€ / ½ off — today™",
    "a_b-c.d,e;f",
    "",
]


def _step_names(options: NormalizeOptions) -> list[str]:
    return [rule.name for rule in SlugNormalizer(options).rules]


def test_default_step_order() -> None:
    """Default options should run transliteration then the fixed cleanup sequence."""

    assert _step_names(NormalizeOptions()) == [
        "transliterate",
        "clean",
        "word_chars",
        "clean",
        "downcase",
        "truncate_bytes",
        "with_separators",
    ]


def test_optional_steps_follow_options() -> None:
    """Disabling transliteration and enabling ASCII stripping should change the steps."""

    assert _step_names(NormalizeOptions(transliterate=False, to_ascii=True))[:2] == [
        "to_ascii",
        "clean",
    ]
    assert _step_names(NormalizeOptions(to_ascii=True))[:2] == ["transliterate", "to_ascii"]


@pytest.mark.parametrize(
    ("text", "options", "expected"),
    [
        ("Hello   World--foo", NormalizeOptions(), "hello-world-foo"),
        ("¡Feliz año!", NormalizeOptions(), "feliz-ano"),
        ("¡Feliz año!", NormalizeOptions(transliterations="spanish"), "feliz-anio"),
        ("Jürgen Müller", NormalizeOptions(transliterations=("german",)), "juergen-mueller"),
        ("日本 Tokyo", NormalizeOptions(), "日本-tokyo"),
        ("日本 Tokyo", NormalizeOptions(to_ascii=True), "tokyo"),
        ("Ünïcode", NormalizeOptions(transliterate=False, to_ascii=True), "ncode"),
        ("Hello World", NormalizeOptions(separator="_"), "hello_world"),
        ("a -- b\n\n c", NormalizeOptions(), "a-b-c"),
    ],
)
def test_normalize_examples(text: str, options: NormalizeOptions, expected: str) -> None:
    """Normalization should combine the configured steps into the expected slug."""

    assert SlugNormalizer(options).run(text) == expected


@pytest.mark.parametrize("text", _SAMPLES)
def test_ascii_slugs_contain_only_lowercase_alphanumerics_and_separator(text: str) -> None:
    """With ASCII stripping enabled, slugs should only use `[a-z0-9]` and the separator."""

    slug = Identifier(text).normalize(NormalizeOptions(to_ascii=True)).text

    assert re.fullmatch(r"[a-z0-9-]*", slug), slug
    assert "--" not in slug
    assert not slug.startswith("-") and not slug.endswith("-")


def test_max_length_limits_encoded_bytes() -> None:
    """The byte budget should be applied before separators are inserted."""

    assert len(SlugNormalizer().run("x" * 300)) == 255
    slug = SlugNormalizer(NormalizeOptions(max_length=10)).run("日本語日本語")
    assert slug == "日本語"
    assert SlugNormalizer(NormalizeOptions(max_length=0)).run("anything") == ""


def test_identifier_token_options() -> None:
    """Token options should force ASCII output and underscores."""

    options = identifier_token_options()

    assert options.to_ascii is True
    assert options.separator == "_"
    assert SlugNormalizer(options).run("Ruby Method Name?") == "ruby_method_name"


def test_unknown_locale_fails_before_running() -> None:
    """Unknown locale tags should raise instead of silently using defaults."""

    with pytest.raises(UnknownLocaleError):
        SlugNormalizer(NormalizeOptions(transliterations="elvish"))


@pytest.mark.parametrize(
    "options",
    [
        NormalizeOptions(max_length=-1),
        NormalizeOptions(separator=None),  # type: ignore[arg-type]
        NormalizeOptions(transliterations=42),  # type: ignore[arg-type]
    ],
)
def test_invalid_options_are_rejected(options: NormalizeOptions) -> None:
    """Invalid option values should fail validation with `ValueError`."""

    with pytest.raises(ValueError):
        SlugNormalizer(options)


def test_run_with_report_records_every_intermediate_value() -> None:
    """Reports should list each step with the text it produced."""

    report = SlugNormalizer().run_with_report("Señor -- Café!")

    assert report.slug == "senor-cafe"
    assert report.steps == (
        ("transliterate", "Senor -- Cafe!"),
        ("clean", "Senor Cafe!"),
        ("word_chars", "Senor Cafe"),
        ("clean", "Senor Cafe"),
        ("downcase", "senor cafe"),
        ("truncate_bytes", "senor cafe"),
        ("with_separators", "senor-cafe"),
    )


def test_run_logger_emits_one_line_per_step() -> None:
    """A step logger should receive deterministic step and completion events."""

    sink = io.StringIO()
    run_logger = RunLogger(sink=sink)
    try:
        SlugNormalizer(run_logger=run_logger).run("Hello World")
    finally:
        run_logger.close()

    lines = sink.getvalue().splitlines()
    assert len(lines) == 8
    assert lines[0] == "[step] level=DEBUG step=transliterate event=complete bytes=11 chars=11"
    assert lines[-1] == "[step] level=INFO step=normalize event=complete chars=11 steps=7"
