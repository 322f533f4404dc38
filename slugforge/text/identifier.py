"""Mutable slug value with in-place and copy-returning operations.

`Identifier` repairs and composes its input on construction, so its text is
always valid Unicode. Each operation comes in two forms:

- `<operation>_inplace(...)` mutates the identifier and returns the new text;
- `<operation>(...)` returns a new `Identifier` and leaves this one untouched.

    >>> Identifier("Jürgen Müller").transliterate("german").text
    'Juergen Mueller'
"""

from __future__ import annotations

from typing import Callable

from ..config import NormalizeOptions
from . import transforms
from .backend import DEFAULT_BACKEND, UnicodeBackend
from .characters import ApproximationRegistry, Transliterations, approximations, is_strippable
from .pipeline import SlugNormalizer, identifier_token_options


class Identifier:
    """Text under slug transformation, bound to one Unicode backend and registry."""

    __slots__ = ("_text", "_backend", "_registry")

    def __init__(
        self,
        value: object,
        backend: UnicodeBackend | None = None,
        registry: ApproximationRegistry | None = None,
    ) -> None:
        """Build from any value with a text representation.

        Bytes are decoded leniently and `None` becomes the empty string.
        """

        self._backend = backend or DEFAULT_BACKEND
        self._registry = registry or approximations
        if value is None:
            raw: str | bytes | bytearray = ""
        elif isinstance(value, (bytes, bytearray)):
            raw = value
        else:
            raw = str(value)
        self._text = self._backend.compose(self._backend.tidy(raw))

    @property
    def text(self) -> str:
        """Current value."""

        return self._text

    @property
    def backend(self) -> UnicodeBackend:
        """Backend used for case mapping, composition and repair."""

        return self._backend

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"Identifier({self._text!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Identifier):
            return self._text == other._text
        if isinstance(other, str):
            return self._text == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._text)

    def __len__(self) -> int:
        return len(self._text)

    def copy(self) -> Identifier:
        """Return an independent identifier with the same text, backend and registry."""

        clone = Identifier.__new__(Identifier)
        clone._text = self._text
        clone._backend = self._backend
        clone._registry = self._registry
        return clone

    def _derive(self, mutator: Callable[[Identifier], object]) -> Identifier:
        clone = self.copy()
        mutator(clone)
        return clone

    # In-place operations

    def transliterate_inplace(self, transliterations: Transliterations = None) -> str:
        """Approximate non-ASCII characters; characters without an approximation stay.

        `transliterations` may be a locale tag such as `"german"`, an explicit
        mapping, or a sequence of either. Unknown tags raise `UnknownLocaleError`.
        """

        self._text = transforms.transliterate(self._text, transliterations, self._registry)
        return self._text

    def to_ascii_inplace(self) -> str:
        """Delete any non-ASCII characters."""

        self._text = transforms.to_ascii(self._text)
        return self._text

    def clean_inplace(self) -> str:
        """Convert dashes to spaces, collapse whitespace, and trim."""

        self._text = transforms.clean(self._text)
        return self._text

    def word_chars_inplace(self, strippable: Callable[[str], bool] = is_strippable) -> str:
        """Remove anything other than letters, digits, spaces, newlines and carriage returns."""

        self._text = transforms.word_chars(self._text, strippable)
        return self._text

    def truncate_inplace(self, max_chars: int) -> str:
        """Truncate to `max_chars` characters."""

        self._text = transforms.truncate(self._text, max_chars)
        return self._text

    def truncate_bytes_inplace(self, max_bytes: int) -> str:
        """Truncate to at most `max_bytes` UTF-8 bytes at a character boundary.

        Useful for fitting a value into a column with a byte limit; the result
        may be shorter than `max_bytes` when a multibyte character does not fit.
        """

        self._text = transforms.truncate_bytes(self._text, max_bytes)
        return self._text

    def with_separators_inplace(self, separator: str = "-") -> str:
        """Replace whitespace with `separator`."""

        self._text = transforms.with_separators(self._text, separator)
        return self._text

    def upcase_inplace(self) -> str:
        """Upper-case through the backend."""

        self._text = self._backend.upcase(self._text)
        return self._text

    def downcase_inplace(self) -> str:
        """Lower-case through the backend."""

        self._text = self._backend.downcase(self._text)
        return self._text

    def normalize_utf8_inplace(self) -> str:
        """Compose combining sequences into precomposed characters."""

        self._text = self._backend.compose(self._text)
        return self._text

    def tidy_bytes_inplace(self) -> str:
        """Repair surrogate-escaped legacy bytes left in the text."""

        self._text = self._backend.tidy(self._text)
        return self._text

    def normalize_inplace(self, options: NormalizeOptions | None = None) -> str:
        """Normalize for use as a URL slug.

        Transliterates, strips non-word characters, downcases, truncates to
        `max_length` bytes and joins words with `separator`.
        """

        normalizer = SlugNormalizer(options, backend=self._backend, registry=self._registry)
        self._text = normalizer.run(self._text)
        return self._text

    def to_identifier_token_inplace(self) -> str:
        """Normalize into an ASCII token usable as a programmatic name."""

        return self.normalize_inplace(identifier_token_options())

    # Copy-returning operations

    def transliterate(self, transliterations: Transliterations = None) -> Identifier:
        """Return a copy with approximated characters; see `transliterate_inplace`."""

        return self._derive(lambda clone: clone.transliterate_inplace(transliterations))

    def to_ascii(self) -> Identifier:
        """Return a copy without non-ASCII characters."""

        return self._derive(Identifier.to_ascii_inplace)

    def clean(self) -> Identifier:
        """Return a copy with dashes and whitespace collapsed."""

        return self._derive(Identifier.clean_inplace)

    def word_chars(self, strippable: Callable[[str], bool] = is_strippable) -> Identifier:
        """Return a copy without strippable characters."""

        return self._derive(lambda clone: clone.word_chars_inplace(strippable))

    def truncate(self, max_chars: int) -> Identifier:
        """Return a copy truncated to `max_chars` characters."""

        return self._derive(lambda clone: clone.truncate_inplace(max_chars))

    def truncate_bytes(self, max_bytes: int) -> Identifier:
        """Return a copy truncated to `max_bytes` UTF-8 bytes."""

        return self._derive(lambda clone: clone.truncate_bytes_inplace(max_bytes))

    def with_separators(self, separator: str = "-") -> Identifier:
        """Return a copy with whitespace replaced by `separator`."""

        return self._derive(lambda clone: clone.with_separators_inplace(separator))

    def upcase(self) -> Identifier:
        """Return an upper-cased copy."""

        return self._derive(Identifier.upcase_inplace)

    def downcase(self) -> Identifier:
        """Return a lower-cased copy."""

        return self._derive(Identifier.downcase_inplace)

    def normalize_utf8(self) -> Identifier:
        """Return a composed copy."""

        return self._derive(Identifier.normalize_utf8_inplace)

    def tidy_bytes(self) -> Identifier:
        """Return a copy with escaped legacy bytes repaired."""

        return self._derive(Identifier.tidy_bytes_inplace)

    def normalize(self, options: NormalizeOptions | None = None) -> Identifier:
        """Return the slug as a new identifier; see `normalize_inplace`."""

        return self._derive(lambda clone: clone.normalize_inplace(options))

    def to_identifier_token(self) -> Identifier:
        """Return the ASCII identifier token as a new identifier."""

        return self._derive(Identifier.to_identifier_token_inplace)


def normalize(value: object, options: NormalizeOptions | None = None) -> str:
    """Return the slug for `value` using `options` (defaults when omitted)."""

    return Identifier(value).normalize_inplace(options)


def to_identifier_token(value: object) -> str:
    """Return an ASCII, underscore-separated token for `value`."""

    return Identifier(value).to_identifier_token_inplace()
