"""
Configuration settings for the record store.

Uses Pydantic Settings to load environment variables for the data directory,
logging, per-ledger capacities and transaction limits, and the payroll rate
table. Every field has a default so the CLI runs without any environment.
"""
from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_allowances() -> Dict[str, Decimal]:
    return {
        "hra": Decimal("0.25"),
        "da": Decimal("0.15"),
        "ta": Decimal("0.10"),
        "medical": Decimal("0.05"),
    }


def _default_deductions() -> Dict[str, Decimal]:
    return {
        "pf": Decimal("0.12"),
        "tax": Decimal("0.10"),
        "insurance": Decimal("0.05"),
    }


class PayrollRates(BaseModel):
    """
    Named rate table applied to basic salary.

    Each entry is a fraction of basic salary; allowances add up to the
    allowance total and deductions to the deduction total.
    """

    allowances: Dict[str, Decimal] = Field(default_factory=_default_allowances)
    deductions: Dict[str, Decimal] = Field(default_factory=_default_deductions)

    def allowance_total(self, basic: Decimal) -> Decimal:
        return sum((basic * rate for rate in self.allowances.values()), Decimal("0"))

    def deduction_total(self, basic: Decimal) -> Decimal:
        return sum((basic * rate for rate in self.deductions.values()), Decimal("0"))


class Settings(BaseSettings):
    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")
    data_dir: Path = Field(Path("."), alias="DATA_DIR")

    # Bank / ATM
    bank_capacity: int = Field(5, alias="BANK_CAPACITY")
    bank_initial_balance: Decimal = Field(Decimal("1000.00"), alias="BANK_INITIAL_BALANCE")
    bank_max_deposit: Decimal = Field(Decimal("10000"), alias="BANK_MAX_DEPOSIT")
    bank_max_withdrawal: Decimal = Field(Decimal("1000"), alias="BANK_MAX_WITHDRAWAL")
    bank_atm_mode: bool = Field(True, alias="BANK_ATM_MODE")
    bank_max_pin_attempts: int = Field(3, alias="BANK_MAX_PIN_ATTEMPTS")

    # Attendance
    attendance_capacity: Optional[int] = Field(None, alias="ATTENDANCE_CAPACITY")
    attendance_good_threshold: float = Field(75.0, alias="ATTENDANCE_GOOD_THRESHOLD")
    attendance_low_threshold: float = Field(50.0, alias="ATTENDANCE_LOW_THRESHOLD")

    # Payroll
    payroll_capacity: Optional[int] = Field(10, alias="PAYROLL_CAPACITY")
    payroll: PayrollRates = Field(default_factory=PayrollRates, alias="PAYROLL_RATES")

    # Voting
    voting_max_candidates: int = Field(5, alias="VOTING_MAX_CANDIDATES")
    voting_max_voters: int = Field(10, alias="VOTING_MAX_VOTERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["PayrollRates", "Settings", "get_settings"]
