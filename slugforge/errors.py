"""Domain exceptions for approximation lookups, byte repair, and CLI diagnostics."""

from __future__ import annotations

from typing import Iterable


class UnknownLocaleError(LookupError):
    """Raised when a locale tag does not resolve to a registered approximation table."""

    def __init__(self, locale: str, known: Iterable[str] = ()) -> None:
        """Initialize with the requested tag and the currently registered tags."""

        self.locale = locale
        self.known = tuple(sorted(known))
        known_text = ", ".join(self.known) if self.known else "none"
        super().__init__(f"Unknown approximation locale `{locale}`; registered: {known_text}.")


class EncodingUnrecoverableError(UnicodeError):
    """Raised when a byte cannot be decoded by any configured legacy encoding."""

    def __init__(self, byte: int, encodings: Iterable[str]) -> None:
        """Initialize with the offending byte value and the encodings that were tried."""

        self.byte = byte
        self.encodings = tuple(encodings)
        super().__init__(
            f"Byte 0x{byte:02x} is not decodable by any of: {', '.join(self.encodings)}."
        )


class CommandStageError(RuntimeError):
    """Raised when a specific CLI command stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped command error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint
