from __future__ import annotations

from pathlib import Path

import pytest

# Load dotenv files early so settings-based fixtures see the test environment
try:  # pragma: no cover
    from dotenv import load_dotenv

    TEST_ROOT = Path(__file__).resolve().parent
    # Load test/.env first, then fallback to test/.env.example for defaults
    load_dotenv(TEST_ROOT / ".env", override=False)
    load_dotenv(TEST_ROOT / ".env.example", override=False)
except ImportError:
    pass

from tabledb.core.config import Settings


@pytest.fixture(scope="session")
def test_config() -> Settings:
    """Fixture providing tabledb settings as loaded from the test environment."""
    return Settings()
