"""Slug transliteration and normalization components.

This package provides the approximation registry, byte repair, the transform
steps, the `Identifier` value, and the `SlugNormalizer` pipeline.
"""

from .backend import DefaultUnicodeBackend, UnicodeBackend
from .characters import (
    ApproximationRegistry,
    add_approximations,
    approximate,
    approximations,
    is_strippable,
)
from .identifier import Identifier, normalize, to_identifier_token
from .pipeline import SlugNormalizer, SlugReport

__all__ = [
    "ApproximationRegistry",
    "DefaultUnicodeBackend",
    "Identifier",
    "SlugNormalizer",
    "SlugReport",
    "UnicodeBackend",
    "add_approximations",
    "approximate",
    "approximations",
    "is_strippable",
    "normalize",
    "to_identifier_token",
]
