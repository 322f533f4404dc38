"""Module entrypoint for running slugforge as ``python -m slugforge``."""

from __future__ import annotations

from slugforge.cli import main


if __name__ == "__main__":
    main()
