from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture
def kyiv_bundle() -> Path:
    """Example bundle shipped under ``examples/kyiv``."""

    return REPO_ROOT / "examples" / "kyiv" / "locations.yaml"
