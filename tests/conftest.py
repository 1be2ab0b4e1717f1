"""
Pytest configuration for the record store.

Provides fixtures for:
- Settings pointed at a temporary data directory
- One empty ledger per variant
- A clean settings cache around every test
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest

from recordstore.config import Settings, get_settings
from recordstore.ledgers import AttendanceLedger, BankLedger, PayrollLedger, VotingLedger


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """
    `get_settings` is cached; tests that change the environment need a fresh read.
    """
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings fixture with every file under a per-test directory.
    """
    return Settings(data_dir=tmp_path, log_level="DEBUG")


@pytest.fixture
def bank(test_settings: Settings) -> BankLedger:
    return BankLedger(test_settings)


@pytest.fixture
def attendance(test_settings: Settings) -> AttendanceLedger:
    return AttendanceLedger(test_settings)


@pytest.fixture
def payroll(test_settings: Settings) -> PayrollLedger:
    return PayrollLedger(test_settings)


@pytest.fixture
def voting(test_settings: Settings) -> VotingLedger:
    return VotingLedger(test_settings)
