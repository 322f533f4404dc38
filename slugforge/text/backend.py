"""Unicode backend strategy for case mapping, composition, and byte repair.

An `Identifier` receives one backend at construction and routes every
case/composition/repair call through it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from .byte_repair import DEFAULT_LEGACY_ENCODINGS, compose, tidy_bytes, tidy_text


class UnicodeBackend(Protocol):
    """Protocol for the text operations that depend on Unicode support."""

    def upcase(self, text: str) -> str:
        """Return `text` upper-cased."""

    def downcase(self, text: str) -> str:
        """Return `text` lower-cased."""

    def compose(self, text: str) -> str:
        """Return `text` with combining sequences composed."""

    def tidy(self, value: str | bytes | bytearray) -> str:
        """Return valid Unicode text repaired from possibly mis-encoded input."""


@dataclass(frozen=True, slots=True)
class DefaultUnicodeBackend:
    """Backend built on `str` case mapping and `unicodedata` normalization.

    Attributes:
        legacy_encodings: Single-byte encodings tried, in order, for invalid UTF-8 bytes.
        composition_form: Normalization form applied by `compose`.
    """

    legacy_encodings: tuple[str, ...] = DEFAULT_LEGACY_ENCODINGS
    composition_form: str = "NFC"

    def upcase(self, text: str) -> str:
        return text.upper()

    def downcase(self, text: str) -> str:
        return text.lower()

    def compose(self, text: str) -> str:
        return compose(text, self.composition_form)

    def tidy(self, value: str | bytes | bytearray) -> str:
        if isinstance(value, (bytes, bytearray)):
            return tidy_bytes(value, self.legacy_encodings)
        return tidy_text(value, self.legacy_encodings)


DEFAULT_BACKEND = DefaultUnicodeBackend()
