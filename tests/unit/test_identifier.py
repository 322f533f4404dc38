"""Unit tests for the `Identifier` value and its dual operation forms."""

from __future__ import annotations

from typing import Callable

import pytest

from slugforge import Identifier, NormalizeOptions, add_approximations, normalize
from slugforge.errors import UnknownLocaleError
from slugforge.text.backend import DefaultUnicodeBackend
from slugforge.text.identifier import to_identifier_token


class _RecordingBackend:
    """Backend stub that tags case operations so routing is observable."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def upcase(self, text: str) -> str:
        self.calls.append("upcase")
        return f"UP:{text}"

    def downcase(self, text: str) -> str:
        self.calls.append("downcase")
        return text.lower()

    def compose(self, text: str) -> str:
        self.calls.append("compose")
        return text

    def tidy(self, value: str | bytes | bytearray) -> str:
        self.calls.append("tidy")
        return value.decode("utf-8") if isinstance(value, (bytes, bytearray)) else value


def test_construction_repairs_bytes_and_composes_text() -> None:
    """Input should be valid, composed Unicode right after construction."""

    assert Identifier(b"caf\xe9").text == "café"
    assert Identifier("été").text == "été"
    assert len(Identifier("é")) == 1
    assert Identifier(42).text == "42"


def test_construction_uses_injected_backend_legacy_encodings() -> None:
    """The backend chosen at construction should drive byte repair."""

    strict = DefaultUnicodeBackend(legacy_encodings=("cp1252",))

    assert Identifier(b"\x81", backend=strict).text == "\ufffd"
    assert Identifier(b"\x81").text == "\x81"


@pytest.mark.parametrize(
    ("text", "locale", "expected"),
    [
        ("Łódź, Poland", None, "Lodz, Poland"),
        ("日本", None, "日本"),
        ("Jürgen Müller", None, "Jurgen Muller"),
        ("Jürgen Müller", "german", "Juergen Mueller"),
        ("¡Feliz año!", None, "¡Feliz ano!"),
        ("¡Feliz año!", "spanish", "¡Feliz anio!"),
        ("Đorđe Balašević", "serbian", "Djordje Balasevic"),
        ("Ђорђе", "serbian", "Djordje"),
    ],
)
def test_transliterate_examples(text: str, locale: str | None, expected: str) -> None:
    """Transliteration should use locale overrides before the Latin defaults."""

    assert Identifier(text).transliterate(locale) == expected


def test_transliterate_uses_runtime_approximations() -> None:
    """Merged locale entries should be picked up by later transliterations."""

    add_approximations("spanish", {"ñ": "nh"})

    assert Identifier("¡Feliz año!").transliterate("spanish").text == "¡Feliz anho!"


def test_transliterate_accepts_explicit_mappings_and_rejects_unknown_locales() -> None:
    """Explicit override mappings should win; unknown tags should raise."""

    assert Identifier("año").transliterate({"ñ": "gn"}).text == "agno"
    with pytest.raises(UnknownLocaleError):
        Identifier("año").transliterate("atlantean")


def test_truncate_examples() -> None:
    """Character and byte truncation should differ for multibyte text."""

    identifier = Identifier("üéøá")

    assert identifier.truncate(3).text == "üéø"
    assert identifier.truncate_bytes(3).text == "ü"


def test_inplace_operations_mutate_and_return_text() -> None:
    """In-place forms should update the identifier and return the new text."""

    identifier = Identifier("  Hello   World--foo ")

    result = identifier.clean_inplace()

    assert result == "Hello World foo"
    assert identifier.text == "Hello World foo"
    assert identifier.with_separators_inplace("_") == "Hello_World_foo"
    assert identifier.downcase_inplace() == "hello_world_foo"


_COPY_OPERATIONS: list[Callable[[Identifier], Identifier]] = [
    lambda identifier: identifier.transliterate("german"),
    lambda identifier: identifier.to_ascii(),
    lambda identifier: identifier.clean(),
    lambda identifier: identifier.word_chars(),
    lambda identifier: identifier.truncate(2),
    lambda identifier: identifier.truncate_bytes(2),
    lambda identifier: identifier.with_separators(),
    lambda identifier: identifier.upcase(),
    lambda identifier: identifier.downcase(),
    lambda identifier: identifier.normalize_utf8(),
    lambda identifier: identifier.tidy_bytes(),
    lambda identifier: identifier.normalize(),
    lambda identifier: identifier.to_identifier_token(),
]


@pytest.mark.parametrize("operation", _COPY_OPERATIONS)
def test_copy_operations_leave_the_original_untouched(
    operation: Callable[[Identifier], Identifier],
) -> None:
    """Copy forms should return a new identifier and never mutate the source."""

    original = Identifier(" Jürgen -- Müller! ")
    before = original.text

    derived = operation(original)

    assert isinstance(derived, Identifier)
    assert derived is not original
    assert original.text == before


def test_copy_keeps_backend() -> None:
    """Derived identifiers should keep using the injected backend."""

    backend = _RecordingBackend()
    identifier = Identifier("abc", backend=backend)

    upper = identifier.upcase()

    assert upper.text == "UP:abc"
    assert upper.backend is backend
    assert backend.calls == ["tidy", "compose", "upcase"]


def test_case_mapping_is_unicode_aware() -> None:
    """Case mapping should handle non-ASCII letters."""

    assert Identifier("straße").upcase().text == "STRASSE"
    assert Identifier("ÀÉÎ ÕÜ").downcase().text == "àéî õü"


def test_identifier_compares_with_strings_and_identifiers() -> None:
    """Equality and string conversion should expose the wrapped text."""

    identifier = Identifier("slug")

    assert identifier == "slug"
    assert identifier == Identifier("slug")
    assert identifier != Identifier("other")
    assert str(identifier) == "slug"
    assert repr(identifier) == "Identifier('slug')"
    assert hash(identifier) == hash("slug")


def test_normalize_builds_url_slugs() -> None:
    """Default normalization should produce lowercase dash-separated slugs."""

    assert Identifier("Hello   World--foo").normalize().text == "hello-world-foo"
    assert normalize("¡Feliz año!") == "feliz-ano"
    assert normalize("Jürgen Müller", NormalizeOptions(transliterations="german")) == (
        "juergen-mueller"
    )


def test_to_identifier_token_uses_ascii_and_underscores() -> None:
    """Identifier tokens should be ASCII and underscore separated."""

    assert Identifier("Hello World!").to_identifier_token().text == "hello_world"
    assert to_identifier_token("Café 日本 crème") == "cafe_creme"


def test_none_becomes_empty_text() -> None:
    """`None` input should behave like an empty string, not the text `None`."""

    assert Identifier(None).text == ""
    assert normalize(None) == ""
    assert to_identifier_token(None) == ""


def test_public_methods_are_documented() -> None:
    """Every public `Identifier` method and property should carry a docstring."""

    undocumented = [
        name
        for name, member in vars(Identifier).items()
        if not name.startswith("_")
        and callable(getattr(member, "fget", member))
        and not (getattr(member, "fget", member).__doc__ or "").strip()
    ]

    assert undocumented == []
