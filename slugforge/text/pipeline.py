"""Slug normalization pipeline.

Responsibilities:
- Build the fixed, option-dependent step sequence of `normalize`.
- Run it over text and optionally report every intermediate value.

Step order: transliterate (optional), to_ascii (optional), clean, word_chars,
clean, downcase, truncate_bytes, with_separators. The second `clean`
re-collapses whitespace left behind by `word_chars`.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..config import NormalizeOptions
from ..telemetry.logger import RunLogger
from .backend import DEFAULT_BACKEND, UnicodeBackend
from .characters import ApproximationRegistry, approximations
from .transforms import (
    CleanWhitespace,
    Downcase,
    KeepWordChars,
    StripNonAscii,
    TransformRule,
    Transliterate,
    TruncateBytes,
    WithSeparators,
)


def identifier_token_options() -> NormalizeOptions:
    """Options producing ASCII, underscore-separated programmatic names."""

    return NormalizeOptions(to_ascii=True, separator="_")


@dataclass(frozen=True, slots=True)
class SlugReport:
    """Structured output of one normalization run.

    Attributes:
        slug: Final normalized value.
        steps: `(step name, text after the step)` pairs in execution order.
    """

    slug: str
    steps: tuple[tuple[str, str], ...]


class SlugNormalizer:
    """Apply the normalization steps selected by `NormalizeOptions`."""

    def __init__(
        self,
        options: NormalizeOptions | None = None,
        backend: UnicodeBackend | None = None,
        registry: ApproximationRegistry | None = None,
        run_logger: RunLogger | None = None,
    ) -> None:
        """Validate options and resolve transliteration overrides once."""

        self.options = options or NormalizeOptions()
        self.options.validate()
        self._backend = backend or DEFAULT_BACKEND
        self._registry = registry or approximations
        self._run_logger = run_logger
        self.rules = self._build_rules()

    def _build_rules(self) -> list[TransformRule]:
        """Return the ordered step list for the configured options."""

        options = self.options
        rules: list[TransformRule] = []
        if options.transliterate:
            overrides = self._registry.resolve_overrides(options.transliterations)
            rules.append(Transliterate(overrides=overrides, registry=self._registry))
        if options.to_ascii:
            rules.append(StripNonAscii())
        rules.extend(
            [
                CleanWhitespace(),
                KeepWordChars(),
                CleanWhitespace(),
                Downcase(self._backend),
                TruncateBytes(options.max_length),
                WithSeparators(options.separator),
            ]
        )
        return rules

    def run_with_report(self, text: str) -> SlugReport:
        """Apply all steps and return the slug with every intermediate value."""

        current = text
        steps: list[tuple[str, str]] = []
        for rule in self.rules:
            try:
                current = rule.apply(current)
            except Exception as exc:
                if self._run_logger is not None:
                    self._run_logger.log_failure(rule.name, type(exc).__name__)
                raise
            steps.append((rule.name, current))
            if self._run_logger is not None:
                self._run_logger.log_step(rule.name, current)
        if self._run_logger is not None:
            self._run_logger.log_run_complete(len(steps), current)
        return SlugReport(slug=current, steps=tuple(steps))

    def run(self, text: str) -> str:
        """Apply all steps in order."""

        return self.run_with_report(text).slug
