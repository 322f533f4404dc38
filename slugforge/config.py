"""Configuration model and loaders for slugforge.

Responsibilities:
- Define per-call normalization options as a typed dataclass with explicit defaults.
- Define file/environment configuration for the command-line interface.
- Provide loader entry points for YAML- and environment-based configuration.

Key types:
- `NormalizeOptions`: options consumed by `SlugNormalizer`.
- `SlugforgeConfig`: normalized settings loaded from a file or the environment.
- `ConfigLoader`: static construction helpers for `SlugforgeConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping

import yaml

from .parsing import (
    normalize_optional_string,
    parse_name_list,
    parse_required_boolean,
)

if TYPE_CHECKING:
    from .text.characters import ApproximationRegistry

DEFAULT_MAX_LENGTH = 255
DEFAULT_SEPARATOR = "-"
DEFAULT_LEGACY_ENCODINGS = ("cp1252", "latin-1")


@dataclass(frozen=True, slots=True)
class NormalizeOptions:
    """Options for one `normalize` run.

    Attributes:
        transliterate: Approximate non-ASCII characters before the other steps.
        transliterations: Locale tag, sequence of tags, or explicit override mapping.
        to_ascii: Drop every non-ASCII character after transliteration.
        max_length: Byte budget of the final slug (UTF-8).
        separator: Replacement for whitespace.
    """

    transliterate: bool = True
    transliterations: str | tuple[str, ...] | Mapping[str, str] | None = None
    to_ascii: bool = False
    max_length: int = DEFAULT_MAX_LENGTH
    separator: str = DEFAULT_SEPARATOR

    def validate(self) -> None:
        """Validate option values before a pipeline run."""

        if not isinstance(self.transliterate, bool):
            raise ValueError("`transliterate` must be a boolean.")
        if not isinstance(self.to_ascii, bool):
            raise ValueError("`to_ascii` must be a boolean.")
        if (
            isinstance(self.max_length, bool)
            or not isinstance(self.max_length, int)
            or self.max_length < 0
        ):
            raise ValueError("`max_length` must be a non-negative integer.")
        if not isinstance(self.separator, str):
            raise ValueError("`separator` must be a string.")
        transliterations = self.transliterations
        if transliterations is None or isinstance(transliterations, (str, Mapping)):
            return
        if not isinstance(transliterations, (list, tuple)) or not all(
            isinstance(item, (str, Mapping)) for item in transliterations
        ):
            raise ValueError(
                "`transliterations` must be a locale tag, a mapping, or a sequence of them."
            )


@dataclass(slots=True)
class SlugforgeConfig:
    """Normalization settings loaded from a config file or the environment.

    Attributes:
        transliterate: Default for `NormalizeOptions.transliterate`.
        transliterations: Locale tags applied in order (later tags win).
        to_ascii: Default for `NormalizeOptions.to_ascii`.
        max_length: Default byte budget.
        separator: Default whitespace replacement.
        legacy_encodings: Encodings tried for invalid UTF-8 bytes, in order.
        approximations: Extra entries per locale merged into the registry.
    """

    transliterate: bool = True
    transliterations: tuple[str, ...] = ()
    to_ascii: bool = False
    max_length: int = DEFAULT_MAX_LENGTH
    separator: str = DEFAULT_SEPARATOR
    legacy_encodings: tuple[str, ...] = DEFAULT_LEGACY_ENCODINGS
    approximations: dict[str, dict[str, str]] = field(default_factory=dict)

    def validate(self) -> None:
        """Validate settings, including that every legacy encoding decodes bytes to text."""

        self.normalize_options().validate()
        if not self.legacy_encodings:
            raise ValueError("`legacy_encodings` must name at least one encoding.")
        for encoding in self.legacy_encodings:
            try:
                b"".decode(encoding)
            except LookupError as exc:
                raise ValueError(
                    f"Unknown legacy encoding `{encoding}`; a bytes-to-text codec is required."
                ) from exc
        for locale, entries in self.approximations.items():
            for key in entries:
                if len(key) != 1:
                    raise ValueError(
                        f"Approximation key `{key}` in locale `{locale}` must be one character."
                    )

    def normalize_options(self) -> NormalizeOptions:
        """Return per-call options derived from these settings."""

        return NormalizeOptions(
            transliterate=self.transliterate,
            transliterations=self.transliterations or None,
            to_ascii=self.to_ascii,
            max_length=self.max_length,
            separator=self.separator,
        )

    def register_approximations(self, registry: ApproximationRegistry) -> None:
        """Merge configured locale entries into `registry`."""

        for locale in sorted(self.approximations):
            registry.add_approximations(locale, self.approximations[locale])


class ConfigLoader:
    """Factory methods for creating `SlugforgeConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "transliterate",
            "transliterations",
            "to_ascii",
            "max_length",
            "separator",
            "legacy_encodings",
            "approximations",
        }
    )

    @staticmethod
    def from_yaml(path: Path) -> SlugforgeConfig:
        """Create a validated config from a YAML file."""

        path_text = path.read_text(encoding="utf-8")
        try:
            payload = yaml.safe_load(path_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` could not be parsed: {exc}") from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> SlugforgeConfig:
        """Create a validated config from `SLUGFORGE_*` environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env

        transliterate = ConfigLoader._optional_env_boolean(env_map, "SLUGFORGE_TRANSLITERATE")
        to_ascii = ConfigLoader._optional_env_boolean(env_map, "SLUGFORGE_TO_ASCII")
        max_length = ConfigLoader._optional_env_non_negative_int(
            env_map, "SLUGFORGE_MAX_LENGTH"
        )
        separator = env_map.get("SLUGFORGE_SEPARATOR")
        transliterations = parse_name_list(env_map.get("SLUGFORGE_TRANSLITERATIONS"))
        legacy_encodings = parse_name_list(env_map.get("SLUGFORGE_LEGACY_ENCODINGS"))

        config = SlugforgeConfig(
            transliterate=True if transliterate is None else transliterate,
            transliterations=transliterations,
            to_ascii=False if to_ascii is None else to_ascii,
            max_length=DEFAULT_MAX_LENGTH if max_length is None else max_length,
            separator=DEFAULT_SEPARATOR if not separator else separator,
            legacy_encodings=legacy_encodings or DEFAULT_LEGACY_ENCODINGS,
        )
        config.validate()
        return config

    @staticmethod
    def _build_config_from_mapping(
        payload: Mapping[str, Any], source_label: str
    ) -> SlugforgeConfig:
        """Build a validated config from a parsed mapping payload."""

        unknown = sorted(set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            key_list = ", ".join(str(key) for key in unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

        try:
            transliterations = parse_name_list(payload.get("transliterations"))
            legacy_encodings = parse_name_list(payload.get("legacy_encodings"))
        except ValueError as exc:
            raise ValueError(f"{source_label}: {exc}") from exc

        config = SlugforgeConfig(
            transliterate=ConfigLoader._optional_boolean(
                payload, "transliterate", source_label, default=True
            ),
            transliterations=transliterations,
            to_ascii=ConfigLoader._optional_boolean(
                payload, "to_ascii", source_label, default=False
            ),
            max_length=ConfigLoader._optional_non_negative_int(
                payload, "max_length", source_label, default=DEFAULT_MAX_LENGTH
            ),
            separator=ConfigLoader._optional_separator(payload, source_label),
            legacy_encodings=legacy_encodings or DEFAULT_LEGACY_ENCODINGS,
            approximations=ConfigLoader._optional_approximations(payload, source_label),
        )
        config.validate()
        return config

    @staticmethod
    def _optional_boolean(
        payload: Mapping[str, Any], key: str, source_label: str, default: bool
    ) -> bool:
        """Read and validate a boolean field from a payload."""

        if key not in payload:
            return default

        try:
            return parse_required_boolean(payload[key], key)
        except ValueError as exc:
            raise ValueError(f"{source_label} field {exc}") from exc

    @staticmethod
    def _optional_non_negative_int(
        payload: Mapping[str, Any], key: str, source_label: str, default: int
    ) -> int:
        """Read and validate a non-negative integer payload field."""

        if key not in payload:
            return default

        raw_value = payload[key]
        if isinstance(raw_value, bool):
            raise ValueError(f"{source_label} field `{key}` must be a non-negative integer.")
        if isinstance(raw_value, int):
            parsed = raw_value
        else:
            normalized = normalize_optional_string(raw_value)
            if normalized is None:
                return default
            try:
                parsed = int(normalized)
            except ValueError as exc:
                raise ValueError(
                    f"{source_label} field `{key}` must be a non-negative integer."
                ) from exc

        if parsed < 0:
            raise ValueError(f"{source_label} field `{key}` must be a non-negative integer.")
        return parsed

    @staticmethod
    def _optional_separator(payload: Mapping[str, Any], source_label: str) -> str:
        """Read the separator verbatim; surrounding whitespace is significant."""

        if "separator" not in payload or payload["separator"] is None:
            return DEFAULT_SEPARATOR
        value = payload["separator"]
        if not isinstance(value, str):
            raise ValueError(f"{source_label} field `separator` must be a string.")
        return value

    @staticmethod
    def _optional_approximations(
        payload: Mapping[str, Any], source_label: str
    ) -> dict[str, dict[str, str]]:
        """Read `approximations` as locale -> {character: replacement}."""

        raw = payload.get("approximations")
        if raw is None:
            return {}
        if not isinstance(raw, Mapping):
            raise ValueError(f"{source_label} field `approximations` must be a mapping/object.")

        normalized: dict[str, dict[str, str]] = {}
        for raw_locale, raw_entries in raw.items():
            locale = normalize_optional_string(raw_locale)
            if locale is None:
                raise ValueError(f"{source_label} field `approximations` contains a blank locale.")
            if not isinstance(raw_entries, Mapping):
                raise ValueError(
                    f"{source_label} locale `{locale}` in `approximations` must be a mapping."
                )
            entries: dict[str, str] = {}
            for raw_char, raw_replacement in raw_entries.items():
                if not isinstance(raw_char, str) or len(raw_char) != 1:
                    raise ValueError(
                        f"{source_label} locale `{locale}` key {raw_char!r} "
                        "must be a single character."
                    )
                if raw_replacement is None:
                    raise ValueError(
                        f"{source_label} locale `{locale}` has no replacement for `{raw_char}`."
                    )
                entries[raw_char] = str(raw_replacement)
            normalized[locale.lower()] = entries
        return normalized

    @staticmethod
    def _optional_env_non_negative_int(env: Mapping[str, str], key: str) -> int | None:
        """Read an optional non-negative integer from environment mapping."""

        raw_value = normalize_optional_string(env.get(key))
        if raw_value is None:
            return None
        try:
            parsed = int(raw_value)
        except ValueError as exc:
            raise ValueError(
                f"Environment variable `{key}` must be a non-negative integer."
            ) from exc
        if parsed < 0:
            raise ValueError(f"Environment variable `{key}` must be a non-negative integer.")
        return parsed

    @staticmethod
    def _optional_env_boolean(env: Mapping[str, str], key: str) -> bool | None:
        """Read an optional boolean from environment mapping."""

        raw_value = env.get(key)
        if normalize_optional_string(raw_value) is None:
            return None
        try:
            return parse_required_boolean(raw_value, key)
        except ValueError as exc:
            raise ValueError(f"Environment variable {exc}") from exc
