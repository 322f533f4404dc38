"""Shared pytest fixtures for the full slugforge test suite."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from slugforge.text.characters import approximations


@pytest.fixture(autouse=True)
def _reset_approximation_tables() -> Iterator[None]:
    """Restore the shared approximation tables after every test."""

    yield
    approximations.reset()
