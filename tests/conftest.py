"""Shared pytest fixtures for spendscan tests."""

from __future__ import annotations

from datetime import date

import pytest

from spendscan.runtime.settings import Settings

FIXED_TODAY = date(2025, 6, 1)

WALMART_RECEIPT = """WALMART
123 Main St
01/15/2024
Milk 2.50
Bread 3.00
TOTAL 5.50
"""


@pytest.fixture
def today() -> date:
    """Fixed reference date so relative/fallback dates are deterministic."""
    return FIXED_TODAY


@pytest.fixture
def settings() -> Settings:
    """Default settings, independent of the developer's environment."""
    return Settings()


@pytest.fixture
def walmart_receipt() -> str:
    return WALMART_RECEIPT


class FakeClock:
    """Manually advanced time source for cache tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
