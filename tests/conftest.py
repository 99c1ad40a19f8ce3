"""Pytest configuration and fixtures."""

from dataclasses import dataclass
from pathlib import Path

import pytest
from dotenv import load_dotenv

from src.lib.config import get_settings

# Load .env file before running tests
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path, override=True)


@dataclass(frozen=True)
class FakeSpy:
    """Minimal spy identity as produced by the spy layer."""

    class_type: str = "Statement"
    connection_number: int = 1


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Make every test start from freshly loaded settings."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def statement_spy():
    return FakeSpy("Statement", 7)


@pytest.fixture
def resultset_spy():
    return FakeSpy("ResultSet", 7)


@pytest.fixture
def connection_spy():
    return FakeSpy("Connection", 7)
