# PATH: tests/conftest.py
"""
Pytest configuration and fixtures for ARBWATCH tests.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.models import Token, TokenPair  # noqa: E402


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


FIXED_NOW = datetime(2026, 1, 22, 17, 14, 26, tzinfo=timezone.utc)


@pytest.fixture
def weth():
    return Token(
        symbol="WETH",
        address="0x7ceB23fD6bC0adD59E62ac25578270cFf1b9f619",
        decimals=18,
    )


@pytest.fixture
def usdc():
    return Token(
        symbol="USDC",
        address="0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174",
        decimals=6,
    )


@pytest.fixture
def weth_usdc(weth, usdc):
    return TokenPair(base=weth, quote=usdc)


@pytest.fixture
def fixed_clock():
    """Clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def fixed_now():
    return FIXED_NOW
