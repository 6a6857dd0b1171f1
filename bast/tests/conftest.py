from __future__ import annotations

from pathlib import Path

import pytest

from bast.config import LoadConfig
from bast.loader import load

TEST_DATA = Path(__file__).parent / "test_data"
PROJECT = TEST_DATA / "project"


@pytest.fixture
def test_data() -> Path:
    return TEST_DATA


@pytest.fixture(scope="module")
def project():
    """The fixture project with its types and models packages loaded."""
    config = LoadConfig(dir=str(PROJECT))
    return load("pkg/types", "pkg/models", config=config)
