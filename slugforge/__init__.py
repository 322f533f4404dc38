"""Top-level package for slugforge.

slugforge turns arbitrary text into predictable slugs for URLs, filenames and
programmatic names. The main entry points are `Identifier` and `normalize`.
"""

from loguru import logger

from .config import NormalizeOptions
from .errors import EncodingUnrecoverableError, UnknownLocaleError
from .text import Identifier, add_approximations, normalize, to_identifier_token

logger.disable("slugforge")

__all__ = [
    "EncodingUnrecoverableError",
    "Identifier",
    "NormalizeOptions",
    "UnknownLocaleError",
    "__version__",
    "add_approximations",
    "normalize",
    "to_identifier_token",
]

__version__ = "0.1.0"
