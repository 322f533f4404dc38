"""Built-in approximation tables.

The `latin` table is the default fallback for every lookup. It is derived from
canonical decompositions of the Latin blocks (a precomposed letter maps to its
ASCII base letter) plus explicit entries for letters that have no
decomposition. The remaining tables are locale overrides consulted before
`latin`.
"""

from __future__ import annotations

import unicodedata

_LATIN_RANGES = (
    (0x00C0, 0x024F),  # Latin-1 Supplement letters, Latin Extended-A/B
    (0x1E00, 0x1EFF),  # Latin Extended Additional
)

_LATIN_SPECIALS = {
    "Æ": "AE",  # LATIN CAPITAL LETTER AE
    "æ": "ae",
    "Ð": "D",  # LATIN CAPITAL LETTER ETH
    "ð": "d",
    "Ø": "O",  # LATIN CAPITAL LETTER O WITH STROKE
    "ø": "o",
    "Þ": "Th",  # LATIN CAPITAL LETTER THORN
    "þ": "th",
    "ß": "ss",  # LATIN SMALL LETTER SHARP S
    "ẞ": "SS",
    "Đ": "D",  # LATIN CAPITAL LETTER D WITH STROKE
    "đ": "d",
    "Ħ": "H",
    "ħ": "h",
    "ı": "i",  # LATIN SMALL LETTER DOTLESS I
    "Ĳ": "IJ",
    "ĳ": "ij",
    "ĸ": "k",  # LATIN SMALL LETTER KRA
    "Ŀ": "L",
    "ŀ": "l",
    "Ł": "L",  # LATIN CAPITAL LETTER L WITH STROKE
    "ł": "l",
    "ŉ": "'n",
    "Ŋ": "N",  # LATIN CAPITAL LETTER ENG
    "ŋ": "n",
    "Œ": "OE",
    "œ": "oe",
    "Ŧ": "T",
    "ŧ": "t",
    "ſ": "s",  # LATIN SMALL LETTER LONG S
    "ƀ": "b",
    "Ɓ": "B",
    "Ƈ": "C",
    "ƈ": "c",
    "Ɗ": "D",
    "Ə": "E",  # LATIN CAPITAL LETTER SCHWA
    "ə": "e",
    "Ƒ": "F",
    "ƒ": "f",
    "Ɠ": "G",
    "Ɨ": "I",
    "Ƙ": "K",
    "ƙ": "k",
    "ƚ": "l",
    "Ɲ": "N",
    "ƞ": "n",
    "Ƥ": "P",
    "ƥ": "p",
    "ƫ": "t",
    "Ƭ": "T",
    "ƭ": "t",
    "Ʈ": "T",
    "Ƴ": "Y",
    "ƴ": "y",
    "Ƶ": "Z",
    "ƶ": "z",
    "Ǆ": "DZ",
    "ǅ": "Dz",
    "ǆ": "dz",
    "Ǉ": "LJ",
    "ǈ": "Lj",
    "ǉ": "lj",
    "Ǌ": "NJ",
    "ǋ": "Nj",
    "ǌ": "nj",
    "Ǣ": "AE",
    "ǣ": "ae",
    "Ǥ": "G",
    "ǥ": "g",
    "Ǳ": "DZ",
    "ǲ": "Dz",
    "ǳ": "dz",
    "Ǽ": "AE",
    "ǽ": "ae",
    "Ǿ": "O",
    "ǿ": "o",
}


def _decomposed_latin() -> dict[str, str]:
    """Map precomposed Latin letters to the ASCII base of their canonical decomposition."""

    table: dict[str, str] = {}
    for start, end in _LATIN_RANGES:
        for codepoint in range(start, end + 1):
            char = chr(codepoint)
            decomposed = unicodedata.normalize("NFD", char)
            if len(decomposed) < 2:
                continue
            base, marks = decomposed[0], decomposed[1:]
            if base.isascii() and base.isalpha() and all(
                unicodedata.combining(mark) for mark in marks
            ):
                table[char] = base
    return table


LATIN = {**_decomposed_latin(), **_LATIN_SPECIALS}

GERMAN = {
    "Ä": "Ae",
    "ä": "ae",
    "Ö": "Oe",
    "ö": "oe",
    "Ü": "Ue",
    "ü": "ue",
}

SPANISH = {
    "Ñ": "Ni",
    "ñ": "ni",
}

DANISH = {
    "Æ": "Ae",
    "æ": "ae",
    "Ø": "Oe",
    "ø": "oe",
    "Å": "Aa",
    "å": "aa",
}

SERBIAN = {
    # Latin script
    "Đ": "Dj",
    "đ": "dj",
    "Ð": "Dj",
    "ð": "dj",
    # Cyrillic script
    "А": "A",
    "Б": "B",
    "В": "V",
    "Г": "G",
    "Д": "D",
    "Ђ": "Dj",
    "Е": "E",
    "Ж": "Z",
    "З": "Z",
    "И": "I",
    "Ј": "J",
    "К": "K",
    "Л": "L",
    "Љ": "Lj",
    "М": "M",
    "Н": "N",
    "Њ": "Nj",
    "О": "O",
    "П": "P",
    "Р": "R",
    "С": "S",
    "Т": "T",
    "Ћ": "C",
    "У": "U",
    "Ф": "F",
    "Х": "H",
    "Ц": "C",
    "Ч": "C",
    "Џ": "Dz",
    "Ш": "S",
    "а": "a",
    "б": "b",
    "в": "v",
    "г": "g",
    "д": "d",
    "ђ": "dj",
    "е": "e",
    "ж": "z",
    "з": "z",
    "и": "i",
    "ј": "j",
    "к": "k",
    "л": "l",
    "љ": "lj",
    "м": "m",
    "н": "n",
    "њ": "nj",
    "о": "o",
    "п": "p",
    "р": "r",
    "с": "s",
    "т": "t",
    "ћ": "c",
    "у": "u",
    "ф": "f",
    "х": "h",
    "ц": "c",
    "ч": "c",
    "џ": "dz",
    "ш": "s",
}

DEFAULT_LOCALE = "latin"

BUILTIN_TABLES: dict[str, dict[str, str]] = {
    DEFAULT_LOCALE: LATIN,
    "german": GERMAN,
    "spanish": SPANISH,
    "danish": DANISH,
    "serbian": SERBIAN,
}
