"""Codepoint approximation registry and character classification.

Responsibilities:
- Hold the process-wide named approximation tables (`latin` is the default).
- Resolve a character against caller overrides, then `latin`, then itself.
- Serialize table merges while readers keep using immutable snapshots.

Key public names:
- `ApproximationRegistry`: named table store with atomic merge publication.
- `approximations`: the shared registry used by `Identifier` and `SlugNormalizer`.
- `add_approximations`, `approximate`, `resolve_overrides`, `is_strippable`.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import threading
from types import MappingProxyType
import unicodedata

from loguru import logger

from ..errors import UnknownLocaleError
from .tables import BUILTIN_TABLES, DEFAULT_LOCALE

ApproximationTable = Mapping[str, str]
Transliterations = str | ApproximationTable | Iterable[str | ApproximationTable] | None

_EMPTY_TABLE: ApproximationTable = MappingProxyType({})
_KEPT_CATEGORIES = frozenset({"Lu", "Ll", "Lt", "Lm", "Lo", "Mn", "Mc", "Me", "Nd"})
_KEPT_WHITESPACE = frozenset({" ", "\n", "\r"})


def _normalize_locale(locale: str) -> str:
    """Return the canonical lookup form of a locale tag."""

    if not isinstance(locale, str) or not locale.strip():
        raise ValueError("Locale tag must be a non-empty string.")
    return locale.strip().lower()


def _normalize_entries(mapping: Mapping[object, object]) -> dict[str, str]:
    """Validate approximation entries, accepting characters or integer codepoints as keys."""

    entries: dict[str, str] = {}
    for raw_key, raw_value in mapping.items():
        if isinstance(raw_key, int) and not isinstance(raw_key, bool):
            key = chr(raw_key)
        elif isinstance(raw_key, str) and len(raw_key) == 1:
            key = raw_key
        else:
            raise ValueError(
                f"Approximation key {raw_key!r} must be a single character or a codepoint."
            )
        if not isinstance(raw_value, str):
            raise ValueError(f"Approximation for {key!r} must be a string, got {raw_value!r}.")
        entries[key] = raw_value
    return entries


def _freeze(tables: Mapping[str, Mapping[str, str]]) -> dict[str, ApproximationTable]:
    return {name: MappingProxyType(dict(table)) for name, table in tables.items()}


class ApproximationRegistry:
    """Named approximation tables shared across transliteration calls.

    Reads go through `snapshot()`, which returns the currently published
    mapping of read-only tables. Writers build a complete replacement under a
    lock and publish it with a single reference assignment, so a reader sees
    either the table before a merge or after it.
    """

    def __init__(self, tables: Mapping[str, Mapping[str, str]] | None = None) -> None:
        """Initialize with explicit tables or the built-in defaults."""

        self._builtin = _freeze(BUILTIN_TABLES if tables is None else tables)
        self._write_lock = threading.Lock()
        self._tables: Mapping[str, ApproximationTable] = MappingProxyType(dict(self._builtin))

    def snapshot(self) -> Mapping[str, ApproximationTable]:
        """Return the currently published tables."""

        return self._tables

    def locales(self) -> tuple[str, ...]:
        """Return registered locale tags in sorted order."""

        return tuple(sorted(self._tables))

    def table(self, locale: str) -> ApproximationTable:
        """Return one named table or raise `UnknownLocaleError`."""

        tables = self._tables
        key = _normalize_locale(locale)
        try:
            return tables[key]
        except KeyError:
            raise UnknownLocaleError(locale, tables.keys()) from None

    @property
    def default(self) -> ApproximationTable:
        """Return the default Latin table (empty when none is registered)."""

        return self._tables.get(DEFAULT_LOCALE, _EMPTY_TABLE)

    def add_approximations(self, locale: str, mapping: Mapping[object, object]) -> None:
        """Merge entries into a named table, creating it when missing.

        Later registrations override earlier ones for the same character.
        """

        key = _normalize_locale(locale)
        entries = _normalize_entries(mapping)
        with self._write_lock:
            current = self._tables
            merged = dict(current.get(key, _EMPTY_TABLE))
            merged.update(entries)
            updated = dict(current)
            updated[key] = MappingProxyType(merged)
            self._tables = MappingProxyType(updated)
        logger.debug("Merged {} approximation(s) into locale `{}`", len(entries), key)

    def reset(self) -> None:
        """Restore the tables this registry was constructed with."""

        with self._write_lock:
            self._tables = MappingProxyType(dict(self._builtin))
        logger.debug("Approximation tables reset to built-in defaults")

    def resolve_overrides(self, transliterations: Transliterations) -> ApproximationTable:
        """Resolve locale tag(s) and/or explicit mappings into one override table.

        `None` resolves to no overrides; a sequence is merged in order with
        later entries winning.
        """

        if transliterations is None:
            return _EMPTY_TABLE
        if isinstance(transliterations, str):
            return self.table(transliterations)
        if isinstance(transliterations, Mapping):
            return MappingProxyType(_normalize_entries(transliterations))

        merged: dict[str, str] = {}
        for item in transliterations:
            if isinstance(item, str):
                merged.update(self.table(item))
            elif isinstance(item, Mapping):
                merged.update(_normalize_entries(item))
            else:
                raise ValueError(
                    f"Transliteration entry {item!r} must be a locale tag or a mapping."
                )
        return MappingProxyType(merged)

    def approximate(self, char: str, overrides: ApproximationTable | None = None) -> str:
        """Return the approximation for one character.

        Resolution order: `overrides`, then the default Latin table, then the
        character itself.
        """

        if overrides:
            replacement = overrides.get(char)
            if replacement is not None:
                return replacement
        return self.default.get(char, char)


approximations = ApproximationRegistry()


def add_approximations(locale: str, mapping: Mapping[object, object]) -> None:
    """Merge entries into a named table of the shared registry."""

    approximations.add_approximations(locale, mapping)


def approximate(char: str, overrides: ApproximationTable | None = None) -> str:
    """Approximate one character through the shared registry."""

    return approximations.approximate(char, overrides)


def resolve_overrides(transliterations: Transliterations) -> ApproximationTable:
    """Resolve transliteration settings through the shared registry."""

    return approximations.resolve_overrides(transliterations)


def is_strippable(char: str) -> bool:
    """Return whether a character is removed by the word-character filter.

    Letters, combining marks, decimal digits, spaces, newlines and carriage
    returns are kept; everything else is strippable.
    """

    if char in _KEPT_WHITESPACE:
        return False
    return unicodedata.category(char) not in _KEPT_CATEGORIES
