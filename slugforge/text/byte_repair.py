"""Repair of mixed-encoding input and Unicode composition.

Responsibilities:
- Decode byte strings that mix valid UTF-8 with single-byte legacy text.
- Recover surrogate-escaped bytes left in `str` values by lenient decoding.
- Compose combining sequences into precomposed codepoints.
"""

from __future__ import annotations

import codecs
from functools import lru_cache
import unicodedata

from loguru import logger

from ..errors import EncodingUnrecoverableError

DEFAULT_LEGACY_ENCODINGS = ("cp1252", "latin-1")
REPLACEMENT_CHARACTER = "\ufffd"

_ESCAPED_BYTE_MIN = 0xDC80
_ESCAPED_BYTE_MAX = 0xDCFF
_SURROGATE_MIN = 0xD800
_SURROGATE_MAX = 0xDFFF


def decode_legacy_byte(byte: int, encodings: tuple[str, ...]) -> str:
    """Decode one byte with the first legacy encoding that defines it.

    Raises:
        EncodingUnrecoverableError: If no encoding in `encodings` maps the byte.
    """

    raw = bytes((byte,))
    for encoding in encodings:
        try:
            return raw.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            continue
    raise EncodingUnrecoverableError(byte, encodings)


@lru_cache(maxsize=None)
def _error_handler_name(encodings: tuple[str, ...]) -> str:
    """Register a codec error handler for one legacy-encoding chain and return its name."""

    name = "slugforge-tidy:" + ",".join(encodings)

    def _handler(exc: UnicodeError) -> tuple[str, int]:
        if not isinstance(exc, UnicodeDecodeError):
            raise exc
        byte = exc.object[exc.start]
        try:
            replacement = decode_legacy_byte(byte, encodings)
        except EncodingUnrecoverableError as error:
            logger.debug("Replacing undecodable byte at offset {}: {}", exc.start, error)
            replacement = REPLACEMENT_CHARACTER
        return replacement, exc.start + 1

    codecs.register_error(name, _handler)
    return name


def require_text_encodings(encodings: tuple[str, ...]) -> None:
    """Raise `LookupError` unless every name is a known bytes-to-text codec.

    `codecs.lookup` also accepts codecs such as `rot13` or `hex`, which
    `bytes.decode` refuses.
    """

    for encoding in encodings:
        b"".decode(encoding)


def tidy_bytes(
    raw: bytes | bytearray,
    legacy_encodings: tuple[str, ...] = DEFAULT_LEGACY_ENCODINGS,
) -> str:
    """Decode bytes as UTF-8, reinterpreting each invalid byte via legacy encodings.

    Valid UTF-8 spans pass through unchanged. A byte that no legacy encoding
    defines becomes U+FFFD, so the function is total over arbitrary input.
    """

    require_text_encodings(tuple(legacy_encodings))
    return bytes(raw).decode("utf-8", errors=_error_handler_name(tuple(legacy_encodings)))


def tidy_text(
    text: str,
    legacy_encodings: tuple[str, ...] = DEFAULT_LEGACY_ENCODINGS,
) -> str:
    """Return `text` with surrogate-escaped bytes repaired and stray surrogates replaced."""

    if not any(_SURROGATE_MIN <= ord(char) <= _SURROGATE_MAX for char in text):
        return text

    pieces: list[str] = []
    pending = bytearray()
    for char in text:
        codepoint = ord(char)
        if _ESCAPED_BYTE_MIN <= codepoint <= _ESCAPED_BYTE_MAX:
            pending.append(codepoint - 0xDC00)
            continue
        if pending:
            pieces.append(tidy_bytes(pending, legacy_encodings))
            pending.clear()
        if _SURROGATE_MIN <= codepoint <= _SURROGATE_MAX:
            pieces.append(REPLACEMENT_CHARACTER)
        else:
            pieces.append(char)
    if pending:
        pieces.append(tidy_bytes(pending, legacy_encodings))
    return "".join(pieces)


def compose(text: str, form: str = "NFC") -> str:
    """Apply Unicode normalization, canonical composition by default."""

    return unicodedata.normalize(form, text)
