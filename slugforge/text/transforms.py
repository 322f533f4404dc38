"""Slug transform steps over Unicode text.

Responsibilities:
- Provide each normalization step as a pure `str -> str` function.
- Wrap the steps as composable rules consumed by `SlugNormalizer`.

Every function works on whole codepoints; none of them splits a character.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Callable, Protocol

from .backend import DEFAULT_BACKEND, UnicodeBackend
from .characters import (
    ApproximationRegistry,
    ApproximationTable,
    Transliterations,
    approximations,
    is_strippable,
)

_WHITESPACE_RUN_RE = re.compile(r"\s+")
_WHITESPACE_RE = re.compile(r"\s")
_NON_ASCII_RE = re.compile(r"[^\x00-\x7f]")


def transliterate(
    text: str,
    transliterations: Transliterations = None,
    registry: ApproximationRegistry | None = None,
) -> str:
    """Replace every approximable character with its ASCII approximation."""

    source = registry or approximations
    overrides = source.resolve_overrides(transliterations)
    return "".join(source.approximate(char, overrides) for char in text)


def to_ascii(text: str) -> str:
    """Delete every codepoint outside 7-bit ASCII."""

    return _NON_ASCII_RE.sub("", text)


def clean(text: str) -> str:
    """Turn dashes into spaces, collapse whitespace runs to one space, and trim."""

    return _WHITESPACE_RUN_RE.sub(" ", text.replace("-", " ")).strip()


def word_chars(text: str, strippable: Callable[[str], bool] = is_strippable) -> str:
    """Remove everything except letters, digits, spaces, newlines and carriage returns."""

    return "".join(char for char in text if not strippable(char))


def truncate(text: str, max_chars: int) -> str:
    """Keep the first `max_chars` codepoints."""

    _require_non_negative(max_chars, "max_chars")
    return text[:max_chars]


def truncate_bytes(text: str, max_bytes: int, encoding: str = "utf-8") -> str:
    """Keep the longest whole-codepoint prefix that encodes within `max_bytes`.

    Stops at the first codepoint that would exceed the budget, so the result
    can be shorter than `max_bytes`.
    """

    _require_non_negative(max_bytes, "max_bytes")
    if len(text.encode(encoding, "surrogatepass")) <= max_bytes:
        return text
    used = 0
    end = 0
    for char in text:
        size = len(char.encode(encoding, "surrogatepass"))
        if used + size > max_bytes:
            break
        used += size
        end += 1
    return text[:end]


def with_separators(text: str, separator: str = "-") -> str:
    """Replace every whitespace codepoint with `separator`."""

    return _WHITESPACE_RE.sub(lambda _match: separator, text)


def _require_non_negative(value: int, field_name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"`{field_name}` must be a non-negative integer, got {value!r}.")


class TransformRule(Protocol):
    """Protocol for one named slug transform step."""

    name: str

    def apply(self, text: str) -> str:
        """Apply a single transformation."""


@dataclass(frozen=True, slots=True)
class Transliterate:
    """Approximate characters using resolved locale overrides."""

    overrides: ApproximationTable
    registry: ApproximationRegistry = field(default=approximations)
    name: str = "transliterate"

    def apply(self, text: str) -> str:
        return "".join(self.registry.approximate(char, self.overrides) for char in text)


@dataclass(frozen=True, slots=True)
class StripNonAscii:
    """Delete non-ASCII codepoints."""

    name: str = "to_ascii"

    def apply(self, text: str) -> str:
        return to_ascii(text)


@dataclass(frozen=True, slots=True)
class CleanWhitespace:
    """Collapse dashes and whitespace."""

    name: str = "clean"

    def apply(self, text: str) -> str:
        return clean(text)


@dataclass(frozen=True, slots=True)
class KeepWordChars:
    """Drop strippable characters."""

    strippable: Callable[[str], bool] = is_strippable
    name: str = "word_chars"

    def apply(self, text: str) -> str:
        return word_chars(text, self.strippable)


@dataclass(frozen=True, slots=True)
class Downcase:
    """Lower-case through the configured backend."""

    backend: UnicodeBackend = DEFAULT_BACKEND
    name: str = "downcase"

    def apply(self, text: str) -> str:
        return self.backend.downcase(text)


@dataclass(frozen=True, slots=True)
class TruncateBytes:
    """Limit the encoded length."""

    max_bytes: int
    name: str = "truncate_bytes"

    def apply(self, text: str) -> str:
        return truncate_bytes(text, self.max_bytes)


@dataclass(frozen=True, slots=True)
class WithSeparators:
    """Replace whitespace with a separator."""

    separator: str = "-"
    name: str = "with_separators"

    def apply(self, text: str) -> str:
        return with_separators(text, self.separator)
