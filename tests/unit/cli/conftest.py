"""Fixtures for CLI command tests."""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import MagicMock, patch

import pytest


@pytest.fixture(autouse=True)
def no_file_logging() -> Iterator[MagicMock]:
    """Keep CLI invocations from writing log files."""
    with patch("spaces_navigator.cli.main.configure_logging") as configure:
        yield configure
