"""Data contracts for PF projection calculations."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

MAX_MONTHLY_SALARY = 10_000_000
MAX_INTEREST_RATE = 0.3
MAX_YEARS = 50


class IncrementMode(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class PartyIncrement(BaseModel):
    """Annual step-up for one party's monthly contribution."""

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    mode: IncrementMode = IncrementMode.PERCENTAGE
    value: float = Field(0.0, ge=0, description="Percent for percentage mode, currency for fixed mode.")


class IncrementPolicy(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    employee: PartyIncrement = Field(default_factory=PartyIncrement)
    employer: PartyIncrement = Field(default_factory=PartyIncrement)


class ProjectionRequest(BaseModel):
    """Inputs required to project a PF balance."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    salary: float = Field(..., ge=0, le=MAX_MONTHLY_SALARY, description="Monthly basic salary.")
    employee_rate: float = Field(
        ...,
        ge=0,
        le=1,
        description="Employee contribution as a fraction of salary (e.g. 0.12 for 12%).",
    )
    employer_rate: float = Field(
        ...,
        ge=0,
        le=1,
        description="Employer contribution as a fraction of salary.",
    )
    annual_interest_rate: float = Field(
        ...,
        ge=0,
        le=MAX_INTEREST_RATE,
        description="Nominal annual interest rate, compounded monthly at rate / 12.",
    )
    years: int = Field(..., ge=1, le=MAX_YEARS, description="Number of years to project.")
    increment_policy: Optional[IncrementPolicy] = None


class YearRecord(BaseModel):
    """Single row of the yearly breakdown."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int = Field(..., ge=1)
    employee_contribution: float
    employer_contribution: float
    interest: float
    balance: float


class IncrementRecord(BaseModel):
    """Monthly salary and contributions in force during a year."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int = Field(..., ge=1)
    monthly_salary: float
    monthly_employee_contribution: float
    monthly_employer_contribution: float
    increment_applied: bool


class ProjectionResult(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    initial_monthly_salary: float
    final_monthly_salary: float
    initial_monthly_employee_contribution: float
    initial_monthly_employer_contribution: float
    final_monthly_employee_contribution: float
    final_monthly_employer_contribution: float
    total_employee_contribution: float
    total_employer_contribution: float
    total_interest_earned: float
    maturity_amount: float
    yearly: List[YearRecord]
    increments: List[IncrementRecord] = Field(default_factory=list)
    increments_applied: bool = False


class GrowthSeries(BaseModel):
    """Cumulative series for charting a projection."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    labels: List[str]
    employee_contributions: List[float]
    employer_contributions: List[float]
    interest: List[float]
    balances: List[float]
    growth_rates: List[float] = Field(default_factory=list)


class ProjectionResponse(BaseModel):
    result: ProjectionResult
    series: GrowthSeries
