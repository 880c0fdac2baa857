from __future__ import annotations

from pathlib import Path

import pytest

from docsite.logging import reset_logging
from tests._fixtures.site_builder import SiteBuilder


@pytest.fixture
def site_builder(tmp_path: Path) -> SiteBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return SiteBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _isolated_logging():
    """Undo handler and warning capture installed by configure_logging."""
    yield
    reset_logging()
