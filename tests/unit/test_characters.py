"""Unit tests for the approximation registry and character classification."""

from __future__ import annotations

import threading

import pytest

from slugforge.errors import UnknownLocaleError
from slugforge.text.characters import (
    ApproximationRegistry,
    add_approximations,
    approximate,
    approximations,
    is_strippable,
    resolve_overrides,
)
from slugforge.text.tables import BUILTIN_TABLES


def test_approximate_prefers_overrides_then_latin_then_character() -> None:
    """Lookups should consult overrides first, then the Latin table, then pass through."""

    overrides = {"ü": "ue"}

    assert approximate("ü", overrides) == "ue"
    assert approximate("ü") == "u"
    assert approximate("é", overrides) == "e"
    assert approximate("日", overrides) == "日"
    assert approximate("a") == "a"


@pytest.mark.parametrize(
    ("char", "expected"),
    [("Ł", "L"), ("ó", "o"), ("ź", "z"), ("ß", "ss"), ("Æ", "AE"), ("ŉ", "'n"), ("Ș", "S")],
)
def test_latin_table_covers_decomposable_and_special_letters(char: str, expected: str) -> None:
    """Latin approximations should cover stroke letters, ligatures and accented letters."""

    assert approximate(char) == expected


def test_builtin_tables_map_non_ascii_keys_to_ascii_values() -> None:
    """Every built-in entry should map a non-ASCII character to pure ASCII."""

    for locale, table in BUILTIN_TABLES.items():
        for char, replacement in table.items():
            assert len(char) == 1, locale
            assert not char.isascii(), (locale, char)
            assert replacement.isascii(), (locale, char, replacement)


def test_table_lookup_is_case_insensitive_and_rejects_unknown_locales() -> None:
    """Locale tags should be normalized and unknown tags should fail clearly."""

    assert approximations.table(" German ")["ü"] == "ue"

    with pytest.raises(UnknownLocaleError) as exc_info:
        approximations.table("klingon")

    assert exc_info.value.locale == "klingon"
    assert "german" in exc_info.value.known
    assert "Unknown approximation locale `klingon`" in str(exc_info.value)


def test_add_approximations_merges_and_later_entries_win() -> None:
    """Merging should keep existing entries and override repeated keys."""

    add_approximations("spanish", {"ñ": "nh"})
    add_approximations("spanish", {"¡": "!"})

    spanish = approximations.table("spanish")
    assert spanish["ñ"] == "nh"
    assert spanish["Ñ"] == "Ni"
    assert spanish["¡"] == "!"


def test_add_approximations_accepts_codepoints_and_creates_new_locales() -> None:
    """Integer codepoint keys should be accepted and unknown tags created."""

    add_approximations("turkish", {0x011F: "g", "ı": "i"})

    assert approximations.table("turkish") == {"ğ": "g", "ı": "i"}
    assert "turkish" in approximations.locales()


@pytest.mark.parametrize("mapping", [{"ab": "x"}, {True: "x"}, {"ñ": 1}])
def test_add_approximations_rejects_malformed_entries(mapping: dict) -> None:
    """Keys must be single characters or codepoints, and values strings."""

    with pytest.raises(ValueError):
        add_approximations("spanish", mapping)


def test_published_snapshot_is_unaffected_by_later_merges() -> None:
    """A snapshot taken before a merge should never observe the merged entries."""

    before = approximations.snapshot()

    add_approximations("german", {"ẞ": "SZ"})

    assert "ẞ" not in before["german"]
    assert approximations.snapshot()["german"]["ẞ"] == "SZ"
    with pytest.raises(TypeError):
        before["german"]["x"] = "y"  # type: ignore[index]


def test_concurrent_merges_keep_every_entry() -> None:
    """Serialized writers should not lose entries merged from parallel threads."""

    registry = ApproximationRegistry()
    characters = [chr(0x4E00 + index) for index in range(64)]

    def _merge(char: str) -> None:
        registry.add_approximations("cjk", {char: "x"})

    threads = [threading.Thread(target=_merge, args=(char,)) for char in characters]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert set(registry.table("cjk")) == set(characters)


def test_reset_restores_constructor_tables() -> None:
    """Reset should drop merged entries and locales."""

    registry = ApproximationRegistry({"latin": {"é": "e"}})
    registry.add_approximations("latin", {"é": "E"})
    registry.add_approximations("extra", {"ø": "o"})

    registry.reset()

    assert registry.locales() == ("latin",)
    assert registry.approximate("é") == "e"


def test_resolve_overrides_merges_sequences_in_order() -> None:
    """Sequences of tags and mappings should merge with later entries winning."""

    assert dict(resolve_overrides(None)) == {}
    assert resolve_overrides("german")["ö"] == "oe"

    merged = resolve_overrides(["danish", "german", {"ø": "oo"}])
    assert merged["ü"] == "ue"
    assert merged["å"] == "aa"
    assert merged["ø"] == "oo"

    with pytest.raises(UnknownLocaleError):
        resolve_overrides(["german", "nowhere"])
    with pytest.raises(ValueError):
        resolve_overrides([42])


@pytest.mark.parametrize(
    ("char", "expected"),
    [
        ("a", False),
        ("Z", False),
        ("7", False),
        ("é", False),
        ("日", False),
        ("\u0301", False),
        (" ", False),
        ("\n", False),
        ("\r", False),
        ("\t", True),
        ("-", True),
        ("_", True),
        ("!", True),
        ("¡", True),
        ("²", True),
        ("—", True),
        ("\u200b", True),
    ],
)
def test_is_strippable_keeps_letters_digits_and_line_whitespace(
    char: str, expected: bool
) -> None:
    """Only letters, marks, decimal digits, spaces and line breaks should be kept."""

    assert is_strippable(char) is expected
